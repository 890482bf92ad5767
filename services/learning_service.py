"""自动学习 - 从一轮对话中提取值得记住的用户信息"""

import json
import re
from typing import Any, List, Optional, Union

from common.config import BASE_DIR, LearningConfig, settings
from common.logger import get_logger
from services.llm_service import LLMService
from storage.models.preferences import CONTEXT_SECTIONS, LearnedInfo, UserContext

logger = get_logger(__name__)

# 回复中的第一个 JSON 对象（容忍前后的说明文字）
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def _clean_items(value: Any, limit: int) -> List[str]:
    """去空白、丢掉空项和非字符串，截断到 limit"""
    if not isinstance(value, list):
        return []
    items = [item.strip() for item in value if isinstance(item, str)]
    return [item for item in items if item][:limit]


class LearningService:
    """提取 + 合并；提取失败只记日志，从不抛给调用方"""

    def __init__(self, llm_service: LLMService, config: Optional[LearningConfig] = None):
        self._llm = llm_service
        self.config = config or settings.learning
        self._prompt = self._load_prompt("learning_extraction.txt")

    def _load_prompt(self, filename: str) -> str:
        """加载 prompt 模板"""
        path = BASE_DIR / "config" / "prompts" / filename
        if path.exists():
            return path.read_text(encoding="utf-8")
        return self._default_prompt()

    def build_prompt(
        self, user_message: str, assistant_reply: str, existing: Optional[UserContext]
    ) -> str:
        existing_text = existing.to_text() if existing else ""
        return self._prompt.format(
            user_message=user_message,
            assistant_reply=assistant_reply,
            existing_context=existing_text or "None yet",
            max_items=self.config.max_new_items,
        )

    def parse(self, text: str) -> Optional[LearnedInfo]:
        """解析 LLM 回复；找不到或解析失败返回 None"""
        if not text:
            return None
        match = _JSON_OBJECT.search(text)
        if not match:
            return None
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError:
            logger.warning("Learning extraction returned malformed JSON")
            return None
        if not isinstance(data, dict):
            return None

        limit = self.config.max_new_items
        return LearnedInfo(
            **{field: _clean_items(data.get(field), limit) for field, _ in CONTEXT_SECTIONS}
        )

    async def extract(
        self,
        user_message: str,
        assistant_reply: str,
        existing: Optional[UserContext] = None,
    ) -> Optional[LearnedInfo]:
        """让 LLM 提取新信息；任何失败都返回 None"""
        try:
            prompt = self.build_prompt(user_message, assistant_reply, existing)
            text = await self._llm.extract(prompt)
            return self.parse(text)
        except Exception as e:
            logger.warning(f"Learning extraction failed: {e}")
            return None

    def merge(
        self, existing: Union[UserContext, str, None], learned: LearnedInfo
    ) -> UserContext:
        """合并到已有背景（已有背景可以是结构或带标签的文本）"""
        if not isinstance(existing, UserContext):
            existing = UserContext.from_text(existing)
        return existing.merge(learned, self.config.max_items_per_category)

    @staticmethod
    def has_new_learnings(learned: Optional[LearnedInfo]) -> bool:
        return learned is not None and not learned.is_empty()

    @staticmethod
    def _default_prompt() -> str:
        return """Analyze this conversation exchange and extract new information worth remembering about the user.

USER MESSAGE: "{user_message}"

ASSISTANT RESPONSE: "{assistant_reply}"

EXISTING CONTEXT ABOUT USER: {existing_context}

Return ONLY a JSON object with the arrays "topics", "preferences", "facts" and "interests".
Include only NEW information, at most {max_items} short items per array."""
