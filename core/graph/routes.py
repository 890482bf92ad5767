"""条件路由函数"""

from core.graph.state import TurnState


def route_after_activity(state: TurnState) -> str:
    """有进行中的游戏先当作答；否则看是否要开新游戏；其余走聊天"""
    if state.get("has_active_game"):
        return "game_answer"
    if state.get("is_game_command"):
        return "game_start"
    return "chat"


def route_after_game_answer(state: TurnState) -> str:
    """作答时游戏已不存在（并发请求刚答完）就按普通消息处理"""
    if state.get("reply") is not None:
        return "end"
    if state.get("is_game_command"):
        return "game_start"
    return "load_history"
