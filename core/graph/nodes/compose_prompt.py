"""组装 system prompt 节点"""

from common.logger import get_logger
from core.graph.state import TurnState

logger = get_logger(__name__)


async def compose_prompt(state: TurnState, **deps) -> dict:
    """人设 + 回复模式 + 沟通风格 + 情绪 + 用户背景 + 喜欢的话题"""
    prompt_service = deps.get("prompt_service")
    prefs = state["preferences"]

    system_prompt = prompt_service.compose(
        response_mode=prefs.response_mode,
        communication_style=prefs.communication_style,
        emotion=state["emotion"],
        user_context=prefs.user_context,
        favorite_topics=prefs.favorite_topics,
    )

    logger.debug(f"System prompt length: {len(system_prompt)}")
    return {"system_prompt": system_prompt}
