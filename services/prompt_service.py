"""System prompt 组装"""

from typing import List, Optional, Union

from common.config import BASE_DIR
from common.logger import get_logger
from services.emotion_service import EmotionResult
from storage.models.preferences import UserContext

logger = get_logger(__name__)

# ── 固定模板 ────────────────────────────────────────────

RESPONSE_MODE_BLOCKS = {
    "expert": (
        "\nRESPONSE MODE: Expert\n"
        "- Use technical terminology when appropriate\n"
        "- Provide detailed, comprehensive explanations\n"
        "- Include relevant technical details and nuances\n"
        "- Be precise and thorough"
    ),
    "casual": (
        "\nRESPONSE MODE: Casual\n"
        "- Keep explanations simple and accessible\n"
        "- Use everyday language, avoid jargon\n"
        "- Be brief and to the point\n"
        "- Focus on practical takeaways"
    ),
    "balanced": (
        "\nRESPONSE MODE: Balanced\n"
        "- Adapt complexity based on the question\n"
        "- Use clear language with technical terms only when needed\n"
        "- Balance thoroughness with accessibility"
    ),
}

COMMUNICATION_STYLE_BLOCKS = {
    "formal": (
        "\n\nCOMMUNICATION STYLE: Formal\n"
        "- Use professional, polished language\n"
        "- Be respectful and measured\n"
        "- Avoid slang and casual expressions"
    ),
    "playful": (
        "\n\nCOMMUNICATION STYLE: Playful\n"
        "- Add humor and wit where appropriate\n"
        "- Use playful language and expressions\n"
        "- Keep the mood light and fun"
    ),
    "friendly": (
        "\n\nCOMMUNICATION STYLE: Friendly\n"
        "- Be warm and approachable\n"
        "- Use conversational language\n"
        "- Balance professionalism with warmth"
    ),
}

_DEFAULT_PERSONA = (
    "You are Rubi, a friendly and efficient virtual secretary and AI assistant. "
    "Be warm, proactive and clear, and always offer to help with the next step."
)


def load_persona(filename: str = "persona.txt") -> str:
    """从 config/prompts 加载人设，缺失时使用内置默认值"""
    path = BASE_DIR / "config" / "prompts" / filename
    if path.exists():
        return path.read_text(encoding="utf-8").strip()
    logger.warning(f"Persona prompt not found: {path}, using default")
    return _DEFAULT_PERSONA


def compose_context_prompt(
    response_mode: str,
    communication_style: str,
    emotion: EmotionResult,
    user_context: Union[UserContext, str, None] = None,
    favorite_topics: Optional[List[str]] = None,
) -> str:
    """
    按固定顺序拼接个性化段落：
    回复模式 → 沟通风格 → 情绪（非 neutral）→ 用户背景 → 喜欢的话题。
    缺失的可选输入直接省略对应段落；未知的模式/风格按 balanced/friendly 处理。
    """
    parts = ["\n\n--- USER CONTEXT & PREFERENCES ---\n"]
    parts.append(RESPONSE_MODE_BLOCKS.get(response_mode, RESPONSE_MODE_BLOCKS["balanced"]))
    parts.append(
        COMMUNICATION_STYLE_BLOCKS.get(
            communication_style, COMMUNICATION_STYLE_BLOCKS["friendly"]
        )
    )

    if emotion.primary_emotion != "neutral":
        parts.append(
            f"\n\nDETECTED EMOTION: {emotion.primary_emotion} "
            f"(confidence: {int(emotion.confidence * 100 + 0.5)}%)\n"
            f"{emotion.tone_adjustment}"
        )

    if isinstance(user_context, UserContext):
        user_context = user_context.to_text()
    if user_context:
        parts.append(f"\n\nUSER BACKGROUND:\n{user_context}")

    if favorite_topics:
        parts.append(
            f"\n\nUSER'S FAVORITE TOPICS: {', '.join(favorite_topics)}\n"
            "- Reference these interests when relevant\n"
            "- Look for connections to topics they enjoy"
        )

    parts.append("\n--- END USER CONTEXT ---\n")
    return "".join(parts)


class PromptService:
    """人设 + 个性化段落 = 最终 system instruction"""

    def __init__(self, persona: Optional[str] = None):
        self.persona = persona if persona is not None else load_persona()

    def compose(
        self,
        response_mode: str,
        communication_style: str,
        emotion: EmotionResult,
        user_context: Union[UserContext, str, None] = None,
        favorite_topics: Optional[List[str]] = None,
    ) -> str:
        return self.persona + compose_context_prompt(
            response_mode,
            communication_style,
            emotion,
            user_context,
            favorite_topics,
        )
