"""消息分析节点 - 情绪识别"""

from common.logger import get_logger
from core.graph.state import TurnState
from services.emotion_service import detect_emotion

logger = get_logger(__name__)


async def analyze_message(state: TurnState, **deps) -> dict:
    """识别情绪并记为用户最近的情绪"""
    preferences_repo = deps.get("preferences_repo")
    user_id = state["user_id"]

    emotion = detect_emotion(state["user_message"])

    try:
        await preferences_repo.upsert(user_id, last_mood=emotion.primary_emotion)
    except Exception as e:
        logger.warning(f"Failed to save last mood: {e}", extra={"user_id": user_id})

    logger.info(
        f"Emotion: {emotion.primary_emotion} ({emotion.confidence:.2f})",
        extra={"user_id": user_id},
    )

    return {"emotion": emotion}
