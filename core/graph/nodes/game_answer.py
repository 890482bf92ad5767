"""游戏作答节点"""

from typing import List, Tuple

from common.config import settings
from common.logger import get_logger
from core.graph.nodes.track_activity import best_effort
from core.graph.state import TurnState
from storage.models.game import GameResult

logger = get_logger(__name__)

# 答对时额外推进的计数器和成就
_WIN_REWARDS = {
    "trivia": (("triviaCorrect", "gamesWon"), ("trivia_winner",)),
    "riddle": (("gamesWon",), ("riddle_solver",)),
    "word": (("gamesWon",), ()),
}


def _rewards(result: GameResult) -> Tuple[List[str], List[str]]:
    """(计数器, 成就)"""
    counters: List[str] = []
    achievements: List[str] = []
    if result.result == "correct":
        win_counters, win_achievements = _WIN_REWARDS[result.kind]
        counters.extend(win_counters)
        achievements.extend(win_achievements)
    if result.finished:
        counters.append("gamesPlayed")
        achievements.extend(("first_game", "game_lover"))
    return counters, achievements


async def game_answer(state: TurnState, **deps) -> dict:
    """
    把消息当作对进行中游戏的作答：
    判题 → 保存回复 → 发放积分与成就。
    谜语答错给提示时游戏继续，不计入已玩局数。
    """
    game_service = deps.get("game_service")
    conversation_repo = deps.get("conversation_repo")
    gamification = deps.get("gamification_manager")
    user_id = state["user_id"]

    result = await game_service.submit_answer(user_id, state["user_message"])
    if result is None:
        logger.info("Active game vanished before answer", extra={"user_id": user_id})
        return {"branch": "chat", "has_active_game": False}

    await conversation_repo.append_message(
        state["conversation_id"], "assistant", result.message
    )

    if settings.gamification.enabled:
        if result.points_awarded:
            await best_effort(
                user_id, "points",
                gamification.add_points(user_id, result.points_awarded),
            )
        counters, achievements = _rewards(result)
        for name in counters:
            await best_effort(
                user_id, name, gamification.increment_counter(user_id, name)
            )
        for code in achievements:
            await best_effort(
                user_id, code, gamification.bump_achievement_progress(user_id, code)
            )
        if result.finished:
            await best_effort(
                user_id, "play_game",
                gamification.bump_challenge_progress(user_id, "play_game"),
            )

    return {
        "branch": "game_answer",
        "reply": result.message,
        "game_result": result,
    }
