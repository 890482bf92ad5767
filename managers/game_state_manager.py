"""进行中小游戏的状态存储"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from common.config import GamesConfig, settings
from common.logger import get_logger
from common.utils.async_utils import KeyedLock
from common.utils.datetime import now
from storage.models.game import ActiveGame

logger = get_logger(__name__)


class GameStateManager:
    """
    每个用户最多一个进行中的游戏。

    状态只保存在进程内存中，重启即丢失；空闲超过 idle_timeout_seconds 的
    游戏由后台任务定期释放。多进程部署需要换成共享存储。
    """

    def __init__(self, config: Optional[GamesConfig] = None):
        self.config = config or settings.games
        self._games: Dict[str, ActiveGame] = {}
        self._locks = KeyedLock()
        self._cleanup_task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        """启动后台清理任务"""
        self._cleanup_task = asyncio.create_task(self._cleanup_loop())
        logger.info("Game state manager started")

    async def stop(self) -> None:
        """停止后台清理任务"""
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None
        logger.info("Game state manager stopped")

    @asynccontextmanager
    async def lock(self, user_id: str) -> AsyncIterator[None]:
        """同一用户的读改写（作答、开局）串行执行"""
        async with self._locks.hold(user_id):
            yield

    def get(self, user_id: str) -> Optional[ActiveGame]:
        game = self._games.get(user_id)
        if game is not None:
            game.last_active = now()
        return game

    def set(self, game: ActiveGame) -> None:
        """写入（覆盖）用户的游戏"""
        if game.user_id in self._games:
            logger.info(
                f"Replacing active {self._games[game.user_id].kind} game",
                extra={"user_id": game.user_id},
            )
        game.last_active = now()
        self._games[game.user_id] = game

    def clear(self, user_id: str) -> None:
        self._games.pop(user_id, None)

    async def _cleanup_loop(self) -> None:
        """定期清理空闲游戏"""
        while True:
            await asyncio.sleep(self.config.cleanup_interval_seconds)
            self.cleanup_idle_games()

    def cleanup_idle_games(self) -> int:
        """释放空闲超时的游戏，返回释放数量"""
        current = now()
        expired = [
            uid
            for uid, game in self._games.items()
            if (current - game.last_active).total_seconds()
            > self.config.idle_timeout_seconds
        ]
        released = 0
        for uid in expired:
            # 正在作答的用户跳过，下一轮再看
            if self._locks.is_locked(uid):
                continue
            del self._games[uid]
            released += 1
            logger.info("Released idle game", extra={"user_id": uid})
        return released

    @property
    def active_count(self) -> int:
        return len(self._games)
