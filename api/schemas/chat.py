"""Chat Schema"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from common.config import settings


class SendMessageRequest(BaseModel):
    """发送消息请求"""

    content: str = Field(..., min_length=1, max_length=settings.chat.max_message_length)
    model: Optional[str] = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v


class DetectEmotionRequest(BaseModel):
    """情绪识别请求"""

    content: str = Field(..., min_length=1, max_length=settings.chat.max_message_length)
