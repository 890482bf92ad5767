"""保存用户消息节点"""

from common.logger import get_logger
from core.graph.state import TurnState

logger = get_logger(__name__)


async def save_user_message(state: TurnState, **deps) -> dict:
    """写入用户消息；失败直接抛出，整轮中止"""
    conversation_repo = deps.get("conversation_repo")

    message = await conversation_repo.append_message(
        state["conversation_id"], "user", state["user_message"]
    )

    logger.debug(
        f"Saved user message {message.id}",
        extra={"conversation_id": state["conversation_id"]},
    )
    return {}
