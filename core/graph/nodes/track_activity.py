"""活跃度记录节点 - 连续打卡、消息计数、时段成就、每日挑战"""

from common.config import settings
from common.logger import get_logger
from common.utils.datetime import now
from core.graph.state import TurnState

logger = get_logger(__name__)

# 每条消息都推进的成就
MESSAGE_ACHIEVEMENTS = ("first_message", "chatty", "conversationalist", "chat_master")


async def best_effort(user_id: str, action: str, coro) -> None:
    try:
        await coro
    except Exception as e:
        logger.warning(
            f"Gamification update failed ({action}): {e}",
            extra={"user_id": user_id},
        )


async def track_activity(state: TurnState, **deps) -> dict:
    """
    记录本条消息带来的游戏化变化（尽力而为，失败只记日志），
    然后判断本轮走哪个分支。
    """
    gamification = deps.get("gamification_manager")
    game_service = deps.get("game_service")
    user_id = state["user_id"]
    config = settings.gamification

    if config.enabled:
        await best_effort(user_id, "streak", gamification.touch_streak(user_id))
        await best_effort(
            user_id, "totalMessages",
            gamification.increment_counter(user_id, "totalMessages"),
        )
        for code in MESSAGE_ACHIEVEMENTS:
            await best_effort(
                user_id, code, gamification.bump_achievement_progress(user_id, code)
            )
        await best_effort(
            user_id, "send_messages",
            gamification.bump_challenge_progress(user_id, "send_messages"),
        )

        # 0 点到 6 点早起鸟，0 点到 4 点夜猫子，两者有重叠
        hour = now().hour
        if 0 <= hour < config.early_bird_end_hour:
            await best_effort(
                user_id, "early_bird",
                gamification.bump_achievement_progress(user_id, "early_bird"),
            )
        if 0 <= hour < config.night_owl_end_hour:
            await best_effort(
                user_id, "night_owl",
                gamification.bump_achievement_progress(user_id, "night_owl"),
            )

    has_active_game = game_service.get_active(user_id) is not None
    is_game_command = game_service.is_game_start_command(state["user_message"])

    return {
        "has_active_game": has_active_game,
        "is_game_command": is_game_command,
    }
