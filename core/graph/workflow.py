"""LangGraph 工作流构建"""

from typing import Any, Dict

from langgraph.graph import END, StateGraph

from common.logger import get_logger
from core.graph.nodes.analyze_message import analyze_message
from core.graph.nodes.compose_prompt import compose_prompt
from core.graph.nodes.game_answer import game_answer
from core.graph.nodes.game_start import game_start
from core.graph.nodes.load_context import load_context
from core.graph.nodes.load_history import load_history
from core.graph.nodes.save_user_message import save_user_message
from core.graph.nodes.track_activity import track_activity
from core.graph.routes import route_after_activity, route_after_game_answer
from core.graph.state import TurnState

logger = get_logger(__name__)


def build_turn_workflow(deps: Dict[str, Any]) -> StateGraph:
    """
    构建单轮对话的准备工作流（流式生成之前的全部步骤）

    load_context → analyze_message → save_user_message → track_activity
        → game_answer | game_start | load_history → compose_prompt

    Args:
        deps: 依赖注入字典，包含各 repository / manager / service 实例
    """
    # 创建带依赖的节点函数
    def _wrap(fn):
        async def wrapped(state):
            return await fn(state, **deps)
        return wrapped

    workflow = StateGraph(TurnState)

    workflow.add_node("load_context", _wrap(load_context))
    workflow.add_node("analyze_message", _wrap(analyze_message))
    workflow.add_node("save_user_message", _wrap(save_user_message))
    workflow.add_node("track_activity", _wrap(track_activity))
    workflow.add_node("game_answer", _wrap(game_answer))
    workflow.add_node("game_start", _wrap(game_start))
    workflow.add_node("load_history", _wrap(load_history))
    workflow.add_node("compose_prompt", _wrap(compose_prompt))

    workflow.set_entry_point("load_context")

    workflow.add_edge("load_context", "analyze_message")
    workflow.add_edge("analyze_message", "save_user_message")
    workflow.add_edge("save_user_message", "track_activity")

    # 条件路由: 作答优先，其次开新游戏，其余聊天
    workflow.add_conditional_edges(
        "track_activity",
        route_after_activity,
        {
            "game_answer": "game_answer",
            "game_start": "game_start",
            "chat": "load_history",
        },
    )

    workflow.add_conditional_edges(
        "game_answer",
        route_after_game_answer,
        {
            "end": END,
            "game_start": "game_start",
            "load_history": "load_history",
        },
    )

    workflow.add_edge("game_start", END)
    workflow.add_edge("load_history", "compose_prompt")
    workflow.add_edge("compose_prompt", END)

    logger.info("Turn workflow built successfully")
    return workflow
