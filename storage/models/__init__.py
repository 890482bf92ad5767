from storage.models.message import Message, Conversation
from storage.models.preferences import (
    LearnedInfo,
    UserContext,
    UserPreferences,
)
from storage.models.game import (
    ActiveGame,
    GameResult,
    Riddle,
    TriviaQuestion,
    WordPuzzle,
)
from storage.models.gamification import (
    Achievement,
    AchievementProgress,
    DailyChallenge,
    GamificationRecord,
    UserStats,
)

__all__ = [
    "Message",
    "Conversation",
    "LearnedInfo",
    "UserContext",
    "UserPreferences",
    "ActiveGame",
    "GameResult",
    "Riddle",
    "TriviaQuestion",
    "WordPuzzle",
    "Achievement",
    "AchievementProgress",
    "DailyChallenge",
    "GamificationRecord",
    "UserStats",
]
