"""情绪识别 - 基于关键词正则表的纯函数"""

import re
from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

EmotionType = Literal[
    "happy", "sad", "angry", "excited", "anxious", "curious", "frustrated", "neutral"
]
MoodType = Literal["happy", "thinking", "excited", "calm", "surprised"]


class EmotionResult(BaseModel):
    """识别结果，对外字段为 camelCase（primaryEmotion / suggestedMood ...）"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    primary_emotion: EmotionType
    confidence: float
    suggested_mood: MoodType
    tone_adjustment: str


# ── 关键词表（英语 + 西班牙语） ────────────────────────

_EMOTION_PATTERNS: Dict[str, List[re.Pattern]] = {
    "happy": [
        re.compile(r"\b(happy|glad|great|awesome|amazing|wonderful|love|excited|fantastic|brilliant|excellent|perfect|incredible)\b", re.I),
        re.compile(r"\b(thank|thanks|gracias|genial|increible|maravilloso|excelente)\b", re.I),
        re.compile(r"\b(joy|joyful|delighted|pleased|cheerful|content|satisfied)\b", re.I),
    ],
    "sad": [
        re.compile(r"\b(sad|upset|depressed|down|crying|disappointed|unhappy|miserable|heartbroken|devastated)\b", re.I),
        re.compile(r"\b(triste|mal|llorar|desanimado|deprimido)\b", re.I),
        re.compile(r"\b(hopeless|despair|grief|sorrow|melancholy|gloomy)\b", re.I),
    ],
    "angry": [
        re.compile(r"\b(angry|mad|furious|annoyed|irritated|hate|enraged|outraged|livid)\b", re.I),
        re.compile(r"\b(enfadado|molesto|odio|furioso|rabioso)\b", re.I),
        re.compile(r"\b(disgusted|fed up|sick of|tired of)\b", re.I),
    ],
    "excited": [
        re.compile(r"\b(excited|thrilled|can't wait|pumped|stoked|eager|anticipating|hyped)\b", re.I),
        re.compile(r"\b(emocionado|entusiasmado|ansioso|ilusionado)\b", re.I),
        # 连续感叹号
        re.compile(r"!{2,}"),
    ],
    "anxious": [
        re.compile(r"\b(worried|anxious|nervous|stressed|scared|afraid|concerned|overwhelmed|panicking)\b", re.I),
        re.compile(r"\b(preocupado|nervioso|estresado|asustado|agobiado)\b", re.I),
        re.compile(r"\b(terrified|frightened|uneasy|restless|tense)\b", re.I),
    ],
    "curious": [
        re.compile(r"\b(curious|wondering|interested|want to know|how|why|what|explain)\b", re.I),
        re.compile(r"\b(curioso|interesado|pregunto|como|porque|que)\b", re.I),
        # 问号
        re.compile(r"\?+"),
    ],
    "frustrated": [
        re.compile(r"\b(stuck|confused|don't understand|help|struggling|difficult|hard|impossible|lost)\b", re.I),
        re.compile(r"\b(no entiendo|dificil|atascado|confundido|perdido)\b", re.I),
        re.compile(r"\b(complicated|overwhelming|giving up|hopeless|broken)\b", re.I),
    ],
    "neutral": [],
}

# 情绪 → 头像表情
EMOTION_TO_MOOD: Dict[str, str] = {
    "happy": "happy",
    "sad": "calm",
    "angry": "calm",
    "excited": "excited",
    "anxious": "thinking",
    "curious": "thinking",
    "frustrated": "thinking",
    "neutral": "happy",
}

# 情绪 → 语气调整指令
EMOTION_TONE_ADJUSTMENTS: Dict[str, str] = {
    "happy": "Match the user's positive energy. Be enthusiastic and celebratory.",
    "sad": "Be extra gentle, supportive, and empathetic. Offer comfort and understanding.",
    "angry": "Stay calm and patient. Acknowledge their frustration and help find solutions.",
    "excited": "Share their excitement! Use energetic language and encourage their enthusiasm.",
    "anxious": "Be reassuring and calm. Break things down into manageable steps. Offer support.",
    "curious": "Engage their curiosity with interesting details and encourage exploration.",
    "frustrated": "Be patient and helpful. Offer clear, step-by-step guidance. Validate their struggle.",
    "neutral": "Be friendly and engaging. Look for opportunities to add value to the conversation.",
}


def score_emotions(text: str) -> Dict[str, int]:
    """每个情绪的得分 = 其所有正则的非重叠匹配次数之和"""
    return {
        emotion: sum(len(pattern.findall(text)) for pattern in patterns)
        for emotion, patterns in _EMOTION_PATTERNS.items()
    }


def detect_emotion(text: str) -> EmotionResult:
    """
    识别文本情绪。

    得分严格最高者胜出；并列最高或全部为 0 时为 neutral。
    confidence = 最高分 / 总分（总分为 0 时为 0）。
    """
    scores = score_emotions(text)
    max_score = max(scores.values())
    total = sum(scores.values())

    leaders = [emotion for emotion, score in scores.items() if score == max_score]
    primary = leaders[0] if max_score > 0 and len(leaders) == 1 else "neutral"
    # 并列时归为 neutral，但 confidence 仍取并列最高分的占比
    confidence = max_score / total if total > 0 else 0.0

    return EmotionResult(
        primary_emotion=primary,
        confidence=confidence,
        suggested_mood=EMOTION_TO_MOOD[primary],
        tone_adjustment=EMOTION_TONE_ADJUSTMENTS[primary],
    )
