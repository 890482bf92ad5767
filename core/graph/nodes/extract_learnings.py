"""学习提取节点 - 后台运行，把新信息合并进用户背景"""

from common.config import settings
from common.logger import get_logger

logger = get_logger(__name__)


async def extract_learnings(state: dict, **deps) -> dict:
    """
    用本轮 (用户消息, 回复, 本轮开始时的背景) 让 LLM 提取新信息。
    合并在偏好仓库的用户锁内基于当前已存的背景进行。
    """
    if not settings.learning.enabled:
        return {}

    learning_service = deps.get("learning_service")
    preferences_repo = deps.get("preferences_repo")

    user_id = state["user_id"]
    prefs = state.get("preferences")
    existing = prefs.user_context if prefs else None

    learned = await learning_service.extract(
        state["user_message"], state["response"], existing
    )
    if not learning_service.has_new_learnings(learned):
        return {}

    context = await preferences_repo.merge_context(
        user_id, lambda current: learning_service.merge(current, learned)
    )
    logger.info("Updated learned context", extra={"user_id": user_id})
    return {"user_context": context}
