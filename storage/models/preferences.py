"""用户偏好模型 - 长期画像"""

import re
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from common.utils.datetime import now

ResponseMode = Literal["expert", "casual", "balanced"]
CommunicationStyle = Literal["formal", "friendly", "playful"]

# (字段名, 文本标签)，顺序即渲染顺序
CONTEXT_SECTIONS = (
    ("topics", "Topics"),
    ("preferences", "Preferences"),
    ("facts", "Facts"),
    ("interests", "Interests"),
)


class LearnedInfo(BaseModel):
    """单次提取出的新信息（不持久化）"""

    topics: List[str] = []
    preferences: List[str] = []
    facts: List[str] = []
    interests: List[str] = []

    def is_empty(self) -> bool:
        return not any(getattr(self, field) for field, _ in CONTEXT_SECTIONS)


class UserContext(BaseModel):
    """
    学到的用户背景，四个有序列表。

    持久化为 JSON 结构；写入 prompt 或返回给前端时渲染为带标签的多行文本：
        Topics: a, b
        Facts: c
    """

    topics: List[str] = []
    preferences: List[str] = []
    facts: List[str] = []
    interests: List[str] = []

    def is_empty(self) -> bool:
        return not any(getattr(self, field) for field, _ in CONTEXT_SECTIONS)

    def to_text(self) -> str:
        """只渲染非空的分类，换行拼接"""
        lines = []
        for field, label in CONTEXT_SECTIONS:
            items = getattr(self, field)
            if items:
                lines.append(f"{label}: {', '.join(items)}")
        return "\n".join(lines)

    def merge(self, learned: LearnedInfo, max_items: int = 10) -> "UserContext":
        """
        合并新学到的信息，返回新对象。

        每个分类：已有项在前、新项在后，按精确字符串去重，保留前 max_items 项。
        同一份 learned 合并两次结果不变。
        """
        merged = {}
        for field, _ in CONTEXT_SECTIONS:
            combined = dict.fromkeys(getattr(self, field) + getattr(learned, field))
            merged[field] = list(combined)[:max_items]
        return UserContext(**merged)

    @classmethod
    def from_text(cls, text: Optional[str]) -> "UserContext":
        """解析带标签的文本；缺失的标签视为空列表"""
        if not text:
            return cls()
        data = {}
        for field, label in CONTEXT_SECTIONS:
            match = re.search(rf"^{label}: (.+?)$", text, re.MULTILINE)
            if match:
                data[field] = [s.strip() for s in match.group(1).split(", ") if s.strip()]
        return cls(**data)


class UserPreferences(BaseModel):
    """每个用户一条，首次写入时创建"""

    user_id: str
    response_mode: ResponseMode = "balanced"
    communication_style: CommunicationStyle = "friendly"
    user_context: UserContext = Field(default_factory=UserContext)
    favorite_topics: List[str] = []
    last_mood: str = "neutral"
    total_interactions: int = 0
    created_at: datetime = Field(default_factory=now)
    last_updated: datetime = Field(default_factory=now)
