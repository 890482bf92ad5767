"""Preferences Schema"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from storage.models.preferences import (
    CommunicationStyle,
    ResponseMode,
    UserPreferences,
)


class UpdatePreferencesRequest(BaseModel):
    """偏好修改请求（只更新给出的字段）"""

    response_mode: Optional[ResponseMode] = None
    communication_style: Optional[CommunicationStyle] = None
    favorite_topics: Optional[List[str]] = Field(default=None, max_length=20)


class PreferencesResponse(BaseModel):
    """用户偏好；学到的背景以带标签的文本返回"""

    response_mode: ResponseMode
    communication_style: CommunicationStyle
    user_context: str
    favorite_topics: List[str]
    last_mood: str
    total_interactions: int
    last_updated: datetime

    @classmethod
    def from_model(cls, prefs: UserPreferences) -> "PreferencesResponse":
        return cls(
            response_mode=prefs.response_mode,
            communication_style=prefs.communication_style,
            user_context=prefs.user_context.to_text(),
            favorite_topics=prefs.favorite_topics,
            last_mood=prefs.last_mood,
            total_interactions=prefs.total_interactions,
            last_updated=prefs.last_updated,
        )
