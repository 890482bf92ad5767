"""后处理节点 - 保存回复、生成标题、累计交互次数"""

from common.config import settings
from common.logger import get_logger
from common.utils.text import derive_title

logger = get_logger(__name__)


async def post_process(state: dict, **deps) -> dict:
    """
    流式回复完成后执行：
    1. 保存助手回复（失败向上抛出）
    2. 对话的第一轮用回复开头生成标题
    3. 交互次数 +1
    """
    conversation_repo = deps.get("conversation_repo")
    preferences_repo = deps.get("preferences_repo")

    user_id = state["user_id"]
    conversation_id = state["conversation_id"]
    response = state["response"]
    log_extra = {"user_id": user_id, "conversation_id": conversation_id}

    await conversation_repo.append_message(conversation_id, "assistant", response)

    title = None
    if not state.get("had_messages"):
        title = derive_title(response, settings.chat.title_max_length)
        if title:
            try:
                await conversation_repo.rename(conversation_id, title)
            except Exception as e:
                logger.warning(f"Failed to set title: {e}", extra=log_extra)
                title = None

    try:
        await preferences_repo.increment_interactions(user_id)
    except Exception as e:
        logger.warning(f"Failed to count interaction: {e}", extra=log_extra)

    return {"title": title}
