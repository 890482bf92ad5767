"""游戏化数据读写"""

from pathlib import Path
from typing import Callable, Optional, TypeVar

from common.config import settings
from common.exceptions import PersistenceError
from common.utils.async_utils import KeyedLock, read_json, write_json
from common.utils.datetime import now
from storage.models.gamification import GamificationRecord

T = TypeVar("T")


class GamificationRepository:
    """
    游戏化数据仓库 - 每个用户一个文档。

    所有修改都经过 mutate()：在用户锁内读取、修改、写回，
    同一用户的并发自增不会丢失更新。
    """

    def __init__(self, base_dir: Optional[Path] = None):
        self._base_dir = (base_dir or settings.data_dir) / "users"
        self._locks = KeyedLock()

    def _path(self, user_id: str) -> Path:
        return self._base_dir / user_id / "gamification.json"

    async def _load(self, user_id: str) -> GamificationRecord:
        path = self._path(user_id)
        if not path.exists():
            return GamificationRecord(user_id=user_id)
        data = await read_json(path)
        return GamificationRecord(**data)

    async def get(self, user_id: str) -> GamificationRecord:
        """读取用户记录，不存在时返回空记录"""
        return await self._load(user_id)

    async def mutate(
        self, user_id: str, fn: Callable[[GamificationRecord], T]
    ) -> T:
        """在用户锁内执行 fn(record) 并保存，返回 fn 的结果"""
        async with self._locks.hold(user_id):
            record = await self._load(user_id)
            result = fn(record)
            record.updated_at = now()
            try:
                await write_json(self._path(user_id), record.model_dump(mode="json"))
            except OSError as e:
                raise PersistenceError(
                    "Failed to save gamification record", detail=str(e)
                ) from e
            return result
