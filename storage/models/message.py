"""对话与消息数据模型"""

from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, Field

from common.utils.datetime import now


class Message(BaseModel):
    """单条消息（写入后不可变，按对话追加）"""

    id: str
    conversation_id: str
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime = Field(default_factory=now)


class Conversation(BaseModel):
    """对话，只归属一个用户；删除时一并删除消息"""

    id: str
    user_id: str
    title: str = "New Chat"
    created_at: datetime = Field(default_factory=now)
    messages: List[Message] = []

    @property
    def message_count(self) -> int:
        return len(self.messages)
