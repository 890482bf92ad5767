"""开始游戏节点"""

from common.logger import get_logger
from core.graph.state import TurnState

logger = get_logger(__name__)


async def game_start(state: TurnState, **deps) -> dict:
    """按触发词选择游戏类型，出题并保存题面"""
    game_service = deps.get("game_service")
    conversation_repo = deps.get("conversation_repo")

    kind = game_service.detect_kind(state["user_message"])
    content = await game_service.start(state["user_id"], kind)

    await conversation_repo.append_message(
        state["conversation_id"], "assistant", content
    )

    return {"branch": "game_start", "reply": content}
