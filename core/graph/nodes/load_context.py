"""加载上下文节点 - 校验对话归属并加载用户偏好"""

from common.exceptions import ConversationNotFoundError
from common.logger import get_logger
from core.graph.state import TurnState

logger = get_logger(__name__)


async def load_context(state: TurnState, **deps) -> dict:
    """
    加载上下文：
    1. 校验对话存在且属于当前用户（不属于时同样报不存在）
    2. 加载用户偏好（没有记录时使用默认值）
    """
    conversation_repo = deps.get("conversation_repo")
    preferences_repo = deps.get("preferences_repo")

    user_id = state["user_id"]
    conversation_id = state["conversation_id"]

    conversation = await conversation_repo.get(conversation_id)
    if conversation is None or conversation.user_id != user_id:
        raise ConversationNotFoundError(
            "Conversation not found", detail=conversation_id
        )

    preferences = await preferences_repo.get_or_default(user_id)

    logger.info(
        f"Loaded context: messages={conversation.message_count}, "
        f"mode={preferences.response_mode}, style={preferences.communication_style}",
        extra={"user_id": user_id, "conversation_id": conversation_id},
    )

    return {
        "preferences": preferences,
        "had_messages": conversation.message_count > 0,
    }
