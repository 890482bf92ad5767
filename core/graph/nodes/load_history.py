"""加载完整对话历史节点"""

from core.graph.state import TurnState


async def load_history(state: TurnState, **deps) -> dict:
    conversation_repo = deps.get("conversation_repo")
    history = await conversation_repo.list_messages(state["conversation_id"])
    return {"branch": "chat", "history": history}
