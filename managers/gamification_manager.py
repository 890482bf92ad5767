"""游戏化账本 - 积分、等级、连续打卡、成就、每日挑战"""

from datetime import timedelta
from typing import Any, Dict, List, Optional

from common.logger import get_logger
from common.utils.datetime import next_midnight, now
from storage.models.achievement_catalog import (
    ACHIEVEMENTS,
    DAILY_CHALLENGE_TYPES,
    LEVEL_THRESHOLDS,
    calculate_level,
    get_achievement,
    points_for_next_level,
)
from storage.models.gamification import (
    AchievementProgress,
    DailyChallenge,
    GamificationRecord,
)
from storage.repositories.gamification_repository import GamificationRepository

logger = get_logger(__name__)

# 连续打卡天数 → 成就
STREAK_ACHIEVEMENTS = ((3, "streak_3"), (7, "streak_7"), (30, "streak_30"))


def _add_points(record: GamificationRecord, points: int) -> None:
    stats = record.stats
    stats.total_points += points
    stats.level = calculate_level(stats.total_points)


def _bump_achievement(record: GamificationRecord, code: str, delta: int) -> bool:
    """推进成就进度，刚解锁时返回 True（积分只加一次）"""
    achievement = get_achievement(code)
    if achievement is None:
        logger.warning(f"Unknown achievement code: {code}")
        return False
    progress = record.achievements.setdefault(code, AchievementProgress())
    if progress.unlocked_at is not None:
        return False
    progress.progress += delta
    if progress.progress >= achievement.requirement:
        progress.unlocked_at = now()
        _add_points(record, achievement.points)
        logger.info(
            f"Achievement unlocked: {code}",
            extra={"user_id": record.user_id},
        )
        return True
    return False


def _active_challenges(record: GamificationRecord) -> List[DailyChallenge]:
    """清掉过期挑战；今天还没有时按模板生成"""
    current = now()
    record.challenges = [c for c in record.challenges if c.expires_at > current]
    if not record.challenges:
        expires_at = next_midnight(current)
        record.challenges = [
            DailyChallenge(
                challenge_type=challenge_type,
                target_count=target,
                bonus_points=bonus,
                expires_at=expires_at,
            )
            for challenge_type, target, bonus in DAILY_CHALLENGE_TYPES
        ]
    return record.challenges


class GamificationManager:
    """游戏化账本：对话管线只通过这里修改积分和成就"""

    def __init__(self, repository: Optional[GamificationRepository] = None):
        self._repo = repository or GamificationRepository()

    # ── 管线调用 ──────────────────────────────────────────

    async def touch_streak(self, user_id: str) -> int:
        """
        记录今日活跃，返回当前连续天数。

        同一天重复调用不变；与上次活跃相隔一天 +1；间隔更久重置为 1。
        """

        def apply(record: GamificationRecord) -> int:
            stats = record.stats
            today = now().date()
            last = stats.last_active_date
            if last == today:
                return stats.current_streak
            if last is not None and last == today - timedelta(days=1):
                stats.current_streak += 1
            else:
                stats.current_streak = 1
            stats.longest_streak = max(stats.longest_streak, stats.current_streak)
            stats.last_active_date = today
            for days, code in STREAK_ACHIEVEMENTS:
                if stats.current_streak >= days:
                    _bump_achievement(record, code, 1)
            return stats.current_streak

        return await self._repo.mutate(user_id, apply)

    async def increment_counter(self, user_id: str, name: str, delta: int = 1) -> int:
        def apply(record: GamificationRecord) -> int:
            counters = record.stats.counters
            counters[name] = counters.get(name, 0) + delta
            return counters[name]

        return await self._repo.mutate(user_id, apply)

    async def add_points(self, user_id: str, points: int) -> int:
        """加积分并重算等级，返回总积分"""

        def apply(record: GamificationRecord) -> int:
            _add_points(record, points)
            return record.stats.total_points

        return await self._repo.mutate(user_id, apply)

    async def bump_achievement_progress(
        self, user_id: str, code: str, delta: int = 1
    ) -> bool:
        """推进成就进度，返回是否在本次解锁"""
        return await self._repo.mutate(
            user_id, lambda record: _bump_achievement(record, code, delta)
        )

    async def bump_challenge_progress(
        self, user_id: str, challenge_type: str, delta: int = 1
    ) -> Optional[DailyChallenge]:
        """推进今日同类型的未完成挑战；完成时发放奖励积分"""

        def apply(record: GamificationRecord) -> Optional[DailyChallenge]:
            challenge = next(
                (
                    c
                    for c in _active_challenges(record)
                    if c.challenge_type == challenge_type and not c.is_completed
                ),
                None,
            )
            if challenge is None:
                return None
            challenge.current_count += delta
            if challenge.current_count >= challenge.target_count:
                challenge.is_completed = True
                _add_points(record, challenge.bonus_points)
            return challenge.model_copy()

        return await self._repo.mutate(user_id, apply)

    # ── 查询 ──────────────────────────────────────────────

    async def get_stats(self, user_id: str) -> Dict[str, Any]:
        """统计数据 + 等级进度"""
        record = await self._repo.get(user_id)
        stats = record.stats
        current_floor = LEVEL_THRESHOLDS[min(stats.level, len(LEVEL_THRESHOLDS)) - 1]
        next_level_points = points_for_next_level(stats.level)
        span = next_level_points - current_floor
        progress = (
            100
            if span <= 0
            else round((stats.total_points - current_floor) / span * 100)
        )
        return {
            **stats.model_dump(mode="json"),
            "next_level_points": next_level_points,
            "level_progress": max(0, min(100, progress)),
        }

    async def list_achievements(self, user_id: str) -> List[Dict[str, Any]]:
        """全部成就及用户进度；未解锁的隐藏成就不显示名称和描述"""
        record = await self._repo.get(user_id)
        items = []
        for achievement in ACHIEVEMENTS:
            progress = record.achievements.get(achievement.code, AchievementProgress())
            unlocked = progress.unlocked_at is not None
            item = achievement.model_dump()
            if achievement.is_secret and not unlocked:
                item["name"] = "???"
                item["description"] = "Secret achievement"
            item["progress"] = progress.progress
            item["unlocked_at"] = (
                progress.unlocked_at.isoformat() if unlocked else None
            )
            items.append(item)
        return items

    async def generate_daily_challenges(self, user_id: str) -> List[DailyChallenge]:
        """返回今日挑战，没有则生成"""
        return await self._repo.mutate(
            user_id,
            lambda record: [c.model_copy() for c in _active_challenges(record)],
        )
