"""小游戏服务 - 选择题 / 谜语 / 单词重组"""

import random
from typing import Optional

from common.config import GamesConfig, settings
from common.logger import get_logger
from managers.game_state_manager import GameStateManager
from storage.models.game import (
    ActiveGame,
    GameKind,
    GameResult,
    Riddle,
    TriviaQuestion,
    WordPuzzle,
)
from storage.models.game_catalog import RIDDLES, TRIVIA_QUESTIONS, WORD_PUZZLES

logger = get_logger(__name__)

# 开始游戏的触发短语（小写子串匹配）
START_TRIGGERS = (
    "play trivia",
    "play a game",
    "trivia",
    "riddle",
    "acertijo",
    "word game",
    "juego de palabras",
    "juguemos",
)

# 谜语作答时放弃并查看答案
SKIP_WORDS = ("skip", "saltar")


# ── 题面格式化 ──────────────────────────────────────────

def format_trivia(q: TriviaQuestion) -> str:
    options = "\n".join(f"{chr(65 + i)}) {opt}" for i, opt in enumerate(q.options))
    return (
        f"**Trivia Time!** ({q.category})\n\n{q.question}\n\n{options}\n\n"
        "Reply with just the letter (A, B, C, or D)!"
    )


def format_riddle(r: Riddle) -> str:
    return f"**Riddle Time!**\n\n{r.question}\n\nThink carefully and reply with your answer!"


def format_word_puzzle(w: WordPuzzle) -> str:
    return (
        f"**Word Scramble!** ({w.category})\n\n"
        f"Unscramble this word: **{w.scrambled}**\n\n"
        f"Hint: {w.hint}\n\nReply with the correct word!"
    )


# ── 判题 ────────────────────────────────────────────────

def check_trivia_answer(answer: str, correct_index: int) -> bool:
    """取首字母，A=0, B=1 ..."""
    letter = answer.strip().upper()[:1]
    if not letter:
        return False
    return ord(letter) - 65 == correct_index


def check_riddle_answer(answer: str, expected: str) -> bool:
    """回答中包含答案即算对"""
    return expected.lower() in answer.lower().strip()


def check_word_answer(answer: str, word: str) -> bool:
    """忽略大小写完全相等"""
    return answer.lower().strip() == word.lower()


class GameService:
    """
    游戏状态机：每个用户 Idle 或 AwaitingAnswer(kind, payload)。

    谜语答错不结束游戏（给出下一条提示），选择题和单词题无论对错都结束。
    """

    def __init__(
        self,
        state_manager: Optional[GameStateManager] = None,
        config: Optional[GamesConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.state = state_manager or GameStateManager()
        self.config = config or settings.games
        self._rng = rng or random.Random()

    @staticmethod
    def is_game_start_command(text: str) -> bool:
        lowered = text.lower().strip()
        return any(trigger in lowered for trigger in START_TRIGGERS)

    @staticmethod
    def detect_kind(text: str) -> GameKind:
        """riddle/acertijo → 谜语；word/palabra → 单词；其余 → 选择题"""
        lowered = text.lower().strip()
        if "riddle" in lowered or "acertijo" in lowered:
            return "riddle"
        if "word" in lowered or "palabra" in lowered:
            return "word"
        return "trivia"

    def get_active(self, user_id: str) -> Optional[ActiveGame]:
        return self.state.get(user_id)

    def clear(self, user_id: str) -> None:
        self.state.clear(user_id)

    async def start(self, user_id: str, kind: GameKind) -> str:
        """随机出题并写入用户状态（已有游戏会被替换），返回题面"""
        if kind == "riddle":
            payload = self._rng.choice(RIDDLES)
            content = format_riddle(payload)
        elif kind == "word":
            payload = self._rng.choice(WORD_PUZZLES)
            content = format_word_puzzle(payload)
        else:
            payload = self._rng.choice(TRIVIA_QUESTIONS)
            content = format_trivia(payload)

        async with self.state.lock(user_id):
            self.state.set(ActiveGame(user_id=user_id, kind=kind, payload=payload))
        logger.info(f"Started {kind} game", extra={"user_id": user_id})
        return content

    async def submit_answer(self, user_id: str, text: str) -> Optional[GameResult]:
        """
        对进行中的游戏作答。

        没有进行中的游戏时返回 None（例如另一个标签页刚刚答完）。
        """
        async with self.state.lock(user_id):
            game = self.state.get(user_id)
            if game is None:
                return None

            if game.kind == "trivia":
                result = self._answer_trivia(game.payload, text)
            elif game.kind == "riddle":
                result = self._answer_riddle(game, text)
            else:
                result = self._answer_word(game.payload, text)

            if result.finished:
                self.state.clear(user_id)

        logger.info(
            f"Game answer: kind={result.kind}, result={result.result}, "
            f"points={result.points_awarded}",
            extra={"user_id": user_id},
        )
        return result

    def _answer_trivia(self, q: TriviaQuestion, text: str) -> GameResult:
        letter = chr(65 + q.correct_index)
        correct_option = q.options[q.correct_index]
        if check_trivia_answer(text, q.correct_index):
            points = self.config.points.trivia
            return GameResult(
                kind="trivia",
                result="correct",
                points_awarded=points,
                message=(
                    f"**Correct!** The answer is {letter}) {correct_option}. "
                    f"You earned {points} points!\n\n"
                    'Want to play another game? Just say "play trivia", "riddle", or "word game"!'
                ),
            )
        return GameResult(
            kind="trivia",
            result="incorrect",
            message=(
                f"**Not quite!** The correct answer was {letter}) {correct_option}.\n\n"
                'Don\'t give up! Say "play trivia" to try again!'
            ),
        )

    def _answer_riddle(self, game: ActiveGame, text: str) -> GameResult:
        riddle: Riddle = game.payload
        if check_riddle_answer(text, riddle.answer):
            points = self.config.points.riddle
            return GameResult(
                kind="riddle",
                result="correct",
                points_awarded=points,
                message=(
                    f'**Brilliant!** You got it! The answer is "{riddle.answer}". '
                    f"You earned {points} points!\n\n"
                    'Want another challenge? Say "riddle" or "play trivia"!'
                ),
            )

        if text.lower().strip() in SKIP_WORDS:
            return GameResult(
                kind="riddle",
                result="incorrect",
                message=(
                    f'**No problem!** The answer was "{riddle.answer}".\n\n'
                    'Want another challenge? Say "riddle" or "play trivia"!'
                ),
            )

        # 依次给出提示，用完后重复最后一条
        if riddle.hints:
            hint = riddle.hints[min(game.hints_given, len(riddle.hints) - 1)]
        else:
            hint = "Think about everyday objects."
        game.hints_given += 1
        return GameResult(
            kind="riddle",
            result="incorrect_with_hint",
            finished=False,
            hint=hint,
            message=(
                f"**Hmm, not quite!** Here's a hint: {hint}\n\n"
                'Try again or say "skip" to see the answer!'
            ),
        )

    def _answer_word(self, w: WordPuzzle, text: str) -> GameResult:
        if check_word_answer(text, w.word):
            points = self.config.points.word
            return GameResult(
                kind="word",
                result="correct",
                points_awarded=points,
                message=(
                    f'**Excellent!** The word is "{w.word}". You earned {points} points!\n\n'
                    'Ready for more? Say "word game" or "play trivia"!'
                ),
            )
        return GameResult(
            kind="word",
            result="incorrect",
            message=(
                f'**Not quite!** The word was "{w.word}".\n\n'
                'Don\'t worry, try another game! Say "word game" or "riddle"!'
            ),
        )
