"""LangGraph 状态定义"""

from typing import List, Literal, Optional, TypedDict

from services.emotion_service import EmotionResult
from storage.models.game import GameResult
from storage.models.message import Message
from storage.models.preferences import UserPreferences


class TurnState(TypedDict):
    """单轮对话的准备阶段状态"""

    # 输入
    user_id: str
    conversation_id: str
    user_message: str
    model: Optional[str]

    # 上下文
    preferences: Optional[UserPreferences]
    # 本条用户消息写入前对话里是否已有消息（决定是否生成标题）
    had_messages: bool

    # 分析结果
    emotion: Optional[EmotionResult]

    # 路由
    has_active_game: bool
    is_game_command: bool
    branch: Literal["game_answer", "game_start", "chat"]

    # 游戏分支输出
    reply: Optional[str]
    game_result: Optional[GameResult]

    # 聊天分支输出
    history: List[Message]
    system_prompt: str
