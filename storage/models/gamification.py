"""积分 / 成就 / 连续打卡 / 每日挑战数据模型"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from common.utils.datetime import now


class Achievement(BaseModel):
    """成就定义（静态目录）"""

    code: str
    name: str
    description: str
    category: str
    points: int = 10
    requirement: int = 1
    is_secret: bool = False


class AchievementProgress(BaseModel):
    """用户在某个成就上的进度"""

    progress: int = 0
    unlocked_at: Optional[datetime] = None


class DailyChallenge(BaseModel):
    """每日挑战，次日零点过期"""

    challenge_type: str
    target_count: int
    current_count: int = 0
    bonus_points: int = 50
    is_completed: bool = False
    expires_at: datetime


class UserStats(BaseModel):
    """用户统计"""

    total_points: int = 0
    level: int = 1
    current_streak: int = 0
    longest_streak: int = 0
    last_active_date: Optional[date] = None
    counters: Dict[str, int] = {}


class GamificationRecord(BaseModel):
    """单个用户的全部游戏化数据，存为一个文档"""

    user_id: str
    stats: UserStats = Field(default_factory=UserStats)
    achievements: Dict[str, AchievementProgress] = {}
    challenges: List[DailyChallenge] = []
    updated_at: datetime = Field(default_factory=now)
