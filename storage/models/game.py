"""小游戏数据模型"""

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from common.utils.datetime import now

GameKind = Literal["trivia", "riddle", "word"]


class TriviaQuestion(BaseModel):
    """选择题"""

    question: str
    options: List[str]
    correct_index: int
    category: str


class Riddle(BaseModel):
    """谜语，答错时依次给出提示"""

    question: str
    answer: str
    hints: List[str]


class WordPuzzle(BaseModel):
    """打乱字母的单词"""

    word: str
    scrambled: str
    hint: str
    category: str


class ActiveGame(BaseModel):
    """用户当前进行中的游戏（每个用户最多一个）"""

    user_id: str
    kind: GameKind
    payload: Union[TriviaQuestion, Riddle, WordPuzzle]
    hints_given: int = 0
    started_at: datetime = Field(default_factory=now)
    last_active: datetime = Field(default_factory=now)


class GameResult(BaseModel):
    """一次作答的结果"""

    kind: GameKind
    result: Literal["correct", "incorrect", "incorrect_with_hint"]
    message: str
    points_awarded: int = 0
    # 谜语答错给提示时为 False：游戏仍在进行
    finished: bool = True
    hint: Optional[str] = None
