from core.graph.nodes.load_context import load_context
from core.graph.nodes.analyze_message import analyze_message
from core.graph.nodes.save_user_message import save_user_message
from core.graph.nodes.track_activity import track_activity
from core.graph.nodes.game_answer import game_answer
from core.graph.nodes.game_start import game_start
from core.graph.nodes.load_history import load_history
from core.graph.nodes.compose_prompt import compose_prompt
from core.graph.nodes.post_process import post_process
from core.graph.nodes.extract_learnings import extract_learnings

__all__ = [
    "load_context",
    "analyze_message",
    "save_user_message",
    "track_activity",
    "game_answer",
    "game_start",
    "load_history",
    "compose_prompt",
    "post_process",
    "extract_learnings",
]
