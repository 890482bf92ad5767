"""对话数据读写"""

import uuid
from pathlib import Path
from typing import List, Optional

from common.config import settings
from common.exceptions import PersistenceError
from common.logger import get_logger
from common.utils.async_utils import KeyedLock, read_json, write_json
from storage.models.message import Conversation, Message

logger = get_logger(__name__)


class ConversationRepository:
    """对话数据仓库 - 每个对话一个 JSON 文档，消息内嵌且只追加"""

    def __init__(self, base_dir: Optional[Path] = None):
        self._base_dir = (base_dir or settings.data_dir) / "conversations"
        self._locks = KeyedLock()

    def _path(self, conversation_id: str) -> Path:
        return self._base_dir / f"{conversation_id}.json"

    async def _load(self, conversation_id: str) -> Optional[Conversation]:
        path = self._path(conversation_id)
        if not path.exists():
            return None
        data = await read_json(path)
        return Conversation(**data)

    async def _save(self, conversation: Conversation) -> None:
        try:
            await write_json(
                self._path(conversation.id), conversation.model_dump(mode="json")
            )
        except OSError as e:
            raise PersistenceError(
                "Failed to save conversation", detail=str(e)
            ) from e

    async def create(self, user_id: str, title: str = "New Chat") -> Conversation:
        """创建对话"""
        conversation = Conversation(
            id=f"conv-{uuid.uuid4().hex[:12]}", user_id=user_id, title=title
        )
        await self._save(conversation)
        logger.info(
            f"Created conversation {conversation.id}",
            extra={"user_id": user_id, "conversation_id": conversation.id},
        )
        return conversation

    async def get(self, conversation_id: str) -> Optional[Conversation]:
        """获取对话（含消息）"""
        # 防止路径穿越
        if not conversation_id or "/" in conversation_id or "\\" in conversation_id:
            return None
        return await self._load(conversation_id)

    async def list_by_user(self, user_id: str) -> List[Conversation]:
        """用户的全部对话，最新的在前"""
        if not self._base_dir.exists():
            return []
        conversations = []
        for path in self._base_dir.glob("*.json"):
            # 遍历期间可能被删除
            try:
                data = await read_json(path)
            except FileNotFoundError:
                continue
            if data.get("user_id") == user_id:
                conversations.append(Conversation(**data))
        conversations.sort(key=lambda c: c.created_at, reverse=True)
        return conversations

    async def delete(self, conversation_id: str) -> bool:
        """删除对话及其全部消息"""
        async with self._locks.hold(conversation_id):
            path = self._path(conversation_id)
            if not path.exists():
                return False
            path.unlink()
        logger.info(
            f"Deleted conversation {conversation_id}",
            extra={"conversation_id": conversation_id},
        )
        return True

    async def append_message(
        self, conversation_id: str, role: str, content: str
    ) -> Message:
        """追加一条消息，同一对话内按加锁顺序落盘"""
        async with self._locks.hold(conversation_id):
            conversation = await self._load(conversation_id)
            if conversation is None:
                raise PersistenceError(
                    "Conversation disappeared before write",
                    detail=conversation_id,
                )
            message = Message(
                id=f"msg-{uuid.uuid4().hex[:8]}",
                conversation_id=conversation_id,
                role=role,
                content=content,
            )
            conversation.messages.append(message)
            await self._save(conversation)
        return message

    async def list_messages(self, conversation_id: str) -> List[Message]:
        """按时间顺序返回对话消息"""
        conversation = await self._load(conversation_id)
        return list(conversation.messages) if conversation else []

    async def rename(self, conversation_id: str, title: str) -> None:
        """更新标题"""
        async with self._locks.hold(conversation_id):
            conversation = await self._load(conversation_id)
            if conversation is None:
                return
            conversation.title = title
            await self._save(conversation)
