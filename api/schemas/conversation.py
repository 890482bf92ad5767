"""Conversation Schema"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from storage.models.message import Conversation, Message


class CreateConversationRequest(BaseModel):
    """创建对话请求"""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)


class ConversationResponse(BaseModel):
    """对话（不含消息）"""

    id: str
    title: str
    created_at: datetime
    message_count: int = 0

    @classmethod
    def from_model(cls, conversation: Conversation) -> "ConversationResponse":
        return cls(
            id=conversation.id,
            title=conversation.title,
            created_at=conversation.created_at,
            message_count=conversation.message_count,
        )


class ConversationDetailResponse(ConversationResponse):
    """对话（含按时间排序的消息）"""

    messages: List[Message] = []

    @classmethod
    def from_model(cls, conversation: Conversation) -> "ConversationDetailResponse":
        return cls(
            id=conversation.id,
            title=conversation.title,
            created_at=conversation.created_at,
            message_count=conversation.message_count,
            messages=conversation.messages,
        )
