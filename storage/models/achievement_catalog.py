"""成就目录与等级阈值"""

from typing import Dict, List, Optional

from storage.models.gamification import Achievement


# ── 成就 ────────────────────────────────────────────────

ACHIEVEMENTS: List[Achievement] = [
    # ── 聊天 ──
    Achievement(code="first_message", name="First Words", description="Send your first message to Rubi", category="chat", points=10, requirement=1),
    Achievement(code="chatty", name="Chatterbox", description="Send 50 messages", category="chat", points=50, requirement=50),
    Achievement(code="conversationalist", name="Conversationalist", description="Send 200 messages", category="chat", points=100, requirement=200),
    Achievement(code="chat_master", name="Chat Master", description="Send 1000 messages", category="chat", points=500, requirement=1000),

    # ── 任务 ──
    Achievement(code="first_task", name="Getting Started", description="Complete your first task", category="tasks", points=15, requirement=1),
    Achievement(code="productive", name="Productive", description="Complete 10 tasks", category="tasks", points=50, requirement=10),
    Achievement(code="task_master", name="Task Master", description="Complete 50 tasks", category="tasks", points=150, requirement=50),
    Achievement(code="unstoppable", name="Unstoppable", description="Complete 200 tasks", category="tasks", points=400, requirement=200),

    # ── 连续打卡 ──
    Achievement(code="streak_3", name="Getting Consistent", description="Maintain a 3-day streak", category="streak", points=30, requirement=1),
    Achievement(code="streak_7", name="Week Warrior", description="Maintain a 7-day streak", category="streak", points=70, requirement=1),
    Achievement(code="streak_30", name="Monthly Master", description="Maintain a 30-day streak", category="streak", points=300, requirement=1),

    # ── 游戏 ──
    Achievement(code="first_game", name="Let's Play", description="Play your first game with Rubi", category="games", points=20, requirement=1),
    Achievement(code="trivia_winner", name="Trivia Champion", description="Answer 10 trivia questions correctly", category="games", points=60, requirement=10),
    Achievement(code="game_lover", name="Game Lover", description="Play 25 games", category="games", points=100, requirement=25),
    Achievement(code="riddle_solver", name="Riddle Solver", description="Solve 5 riddles correctly", category="games", points=50, requirement=5),

    # ── 特殊 ──
    Achievement(code="night_owl", name="Night Owl", description="Chat with Rubi after midnight", category="special", points=25, requirement=1, is_secret=True),
    Achievement(code="early_bird", name="Early Bird", description="Chat with Rubi before 6 AM", category="special", points=25, requirement=1, is_secret=True),
]

_BY_CODE: Dict[str, Achievement] = {a.code: a for a in ACHIEVEMENTS}


def get_achievement(code: str) -> Optional[Achievement]:
    """按 code 查找成就"""
    return _BY_CODE.get(code)


# ── 等级 ────────────────────────────────────────────────

LEVEL_THRESHOLDS: List[int] = [
    0, 100, 300, 600, 1000, 1500, 2100, 2800, 3600, 4500,  # 1-10
    5500, 6600, 7800, 9100, 10500, 12000, 13600, 15300, 17100, 19000,  # 11-20
]


def calculate_level(points: int) -> int:
    """积分对应的等级（1 起）"""
    for i in range(len(LEVEL_THRESHOLDS) - 1, -1, -1):
        if points >= LEVEL_THRESHOLDS[i]:
            return i + 1
    return 1


def points_for_next_level(level: int) -> int:
    """升到下一级所需的累计积分；满级时返回最高阈值"""
    if level >= len(LEVEL_THRESHOLDS):
        return LEVEL_THRESHOLDS[-1]
    return LEVEL_THRESHOLDS[level]


# ── 每日挑战 ────────────────────────────────────────────

# (类型, 目标次数, 奖励积分)
DAILY_CHALLENGE_TYPES = [
    ("send_messages", 5, 30),
    ("complete_task", 1, 50),
    ("play_game", 1, 40),
]
