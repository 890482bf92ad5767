"""用户偏好数据读写"""

from pathlib import Path
from typing import Any, Callable, Dict, Optional

from common.config import settings
from common.exceptions import PersistenceError
from common.logger import get_logger
from common.utils.async_utils import KeyedLock, read_json, write_json
from common.utils.datetime import now
from storage.models.preferences import UserContext, UserPreferences

logger = get_logger(__name__)


class PreferencesRepository:
    """用户偏好仓库"""

    def __init__(self, base_dir: Optional[Path] = None):
        self._base_dir = (base_dir or settings.data_dir) / "users"
        self._locks = KeyedLock()

    def _path(self, user_id: str) -> Path:
        return self._base_dir / user_id / "preferences.json"

    async def _load(self, user_id: str) -> Optional[UserPreferences]:
        path = self._path(user_id)
        if not path.exists():
            return None
        data = await read_json(path)
        return UserPreferences(**data)

    async def _save(self, prefs: UserPreferences) -> UserPreferences:
        prefs.last_updated = now()
        try:
            await write_json(self._path(prefs.user_id), prefs.model_dump(mode="json"))
        except OSError as e:
            raise PersistenceError("Failed to save preferences", detail=str(e)) from e
        return prefs

    async def get(self, user_id: str) -> Optional[UserPreferences]:
        """获取用户偏好，不存在返回 None"""
        return await self._load(user_id)

    async def get_or_default(self, user_id: str) -> UserPreferences:
        """获取用户偏好，不存在则返回默认值（不写盘）"""
        return await self._load(user_id) or UserPreferences(user_id=user_id)

    async def upsert(self, user_id: str, **fields: Any) -> UserPreferences:
        """部分更新，记录不存在时创建"""
        async with self._locks.hold(user_id):
            prefs = await self._load(user_id) or UserPreferences(user_id=user_id)
            data: Dict[str, Any] = prefs.model_dump()
            data.update(fields)
            return await self._save(UserPreferences(**data))

    async def increment_interactions(self, user_id: str) -> int:
        """交互计数 +1（锁内读改写，不丢更新）"""
        async with self._locks.hold(user_id):
            prefs = await self._load(user_id) or UserPreferences(user_id=user_id)
            prefs.total_interactions += 1
            await self._save(prefs)
            return prefs.total_interactions

    async def merge_context(
        self, user_id: str, merge_fn: Callable[[UserContext], UserContext]
    ) -> UserContext:
        """在锁内基于当前已存的背景做合并，避免覆盖并发写入"""
        async with self._locks.hold(user_id):
            prefs = await self._load(user_id) or UserPreferences(user_id=user_id)
            prefs.user_context = merge_fn(prefs.user_context)
            await self._save(prefs)
            return prefs.user_context
