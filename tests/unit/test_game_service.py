"""小游戏单元测试"""

from datetime import timedelta

import pytest


def _set_game(service, user_id, kind, payload):
    from storage.models.game import ActiveGame

    service.state.set(ActiveGame(user_id=user_id, kind=kind, payload=payload))


class TestTriggers:
    """开局触发词与游戏类型"""

    @pytest.mark.parametrize(
        "text",
        ["Let's play trivia!", "tell me a RIDDLE", "Juguemos un acertijo", "play a game"],
    )
    def test_start_commands(self, text):
        from services.game_service import GameService

        assert GameService.is_game_start_command(text)

    def test_plain_chat_is_not_a_command(self):
        from services.game_service import GameService

        assert not GameService.is_game_start_command("How are you today?")

    @pytest.mark.parametrize(
        "text,kind",
        [
            ("riddle please", "riddle"),
            ("un acertijo", "riddle"),
            ("word game", "word"),
            ("juego de palabras", "word"),
            ("play trivia", "trivia"),
            ("play a game", "trivia"),
        ],
    )
    def test_detect_kind(self, text, kind):
        from services.game_service import GameService

        assert GameService.detect_kind(text) == kind


class TestAnswerCheckers:
    """判题函数"""

    def test_trivia_uses_first_letter(self):
        from services.game_service import check_trivia_answer

        assert check_trivia_answer("b", 1)
        assert check_trivia_answer(" B) Tokyo", 1)
        assert not check_trivia_answer("C", 1)
        assert not check_trivia_answer("", 1)

    def test_riddle_accepts_containing_answer(self):
        from services.game_service import check_riddle_answer

        assert check_riddle_answer("Is it a CLOCK?", "clock")
        assert not check_riddle_answer("a watch", "clock")

    def test_word_requires_exact_match(self):
        from services.game_service import check_word_answer

        assert check_word_answer("  computer ", "COMPUTER")
        assert not check_word_answer("computers", "COMPUTER")

    def test_format_trivia_lists_lettered_options(self):
        from services.game_service import format_trivia
        from storage.models.game_catalog import TRIVIA_QUESTIONS

        text = format_trivia(TRIVIA_QUESTIONS[0])
        assert "A) Seoul" in text
        assert "D) Bangkok" in text
        assert "(Geography)" in text


class TestGameService:
    """作答状态机"""

    @pytest.mark.asyncio
    async def test_start_stores_game(self, game_service):
        content = await game_service.start("u1", "word")
        game = game_service.get_active("u1")
        assert game is not None
        assert game.kind == "word"
        assert game.payload.scrambled in content

    @pytest.mark.asyncio
    async def test_start_replaces_existing_game(self, game_service):
        await game_service.start("u1", "trivia")
        await game_service.start("u1", "riddle")
        assert game_service.get_active("u1").kind == "riddle"
        assert game_service.state.active_count == 1

    @pytest.mark.asyncio
    async def test_no_active_game_returns_none(self, game_service):
        assert await game_service.submit_answer("u1", "A") is None

    @pytest.mark.asyncio
    async def test_trivia_correct(self, game_service):
        from storage.models.game_catalog import TRIVIA_QUESTIONS

        _set_game(game_service, "u1", "trivia", TRIVIA_QUESTIONS[0])
        result = await game_service.submit_answer("u1", "B")

        assert result.result == "correct"
        assert result.points_awarded == 15
        assert "B) Tokyo" in result.message
        assert result.finished
        assert game_service.get_active("u1") is None

    @pytest.mark.asyncio
    async def test_trivia_wrong_ends_game(self, game_service):
        from storage.models.game_catalog import TRIVIA_QUESTIONS

        _set_game(game_service, "u1", "trivia", TRIVIA_QUESTIONS[0])
        result = await game_service.submit_answer("u1", "A")

        assert result.result == "incorrect"
        assert result.points_awarded == 0
        assert "B) Tokyo" in result.message
        assert game_service.get_active("u1") is None

    @pytest.mark.asyncio
    async def test_riddle_hints_then_solve(self, game_service):
        """答错依次给提示，提示用完重复最后一条，答对后结束"""
        from storage.models.game_catalog import RIDDLES

        _set_game(game_service, "u1", "riddle", RIDDLES[0])

        first = await game_service.submit_answer("u1", "a painting")
        assert first.result == "incorrect_with_hint"
        assert first.hint == "I hang on walls"
        assert not first.finished
        assert game_service.get_active("u1") is not None

        second = await game_service.submit_answer("u1", "a mirror")
        assert second.hint == "I tell time"

        third = await game_service.submit_answer("u1", "a door")
        assert third.hint == "I tell time"

        solved = await game_service.submit_answer("u1", "It's a clock")
        assert solved.result == "correct"
        assert solved.points_awarded == 20
        assert game_service.get_active("u1") is None

    @pytest.mark.asyncio
    async def test_riddle_skip_reveals_answer(self, game_service):
        from storage.models.game_catalog import RIDDLES

        _set_game(game_service, "u1", "riddle", RIDDLES[0])
        result = await game_service.submit_answer("u1", " Saltar ")

        assert result.result == "incorrect"
        assert result.finished
        assert '"clock"' in result.message
        assert game_service.get_active("u1") is None

    @pytest.mark.asyncio
    async def test_word_puzzle(self, game_service):
        from storage.models.game_catalog import WORD_PUZZLES

        _set_game(game_service, "u1", "word", WORD_PUZZLES[0])
        result = await game_service.submit_answer("u1", "computer")
        assert result.result == "correct"
        assert result.points_awarded == 15

    @pytest.mark.asyncio
    async def test_games_are_per_user(self, game_service):
        await game_service.start("u1", "trivia")
        assert game_service.get_active("u2") is None
        assert await game_service.submit_answer("u2", "A") is None
        assert game_service.get_active("u1") is not None


class TestGameStateManager:
    """空闲清理"""

    def test_cleanup_releases_idle_games(self):
        from common.utils.datetime import now
        from managers.game_state_manager import GameStateManager
        from storage.models.game import ActiveGame
        from storage.models.game_catalog import RIDDLES

        manager = GameStateManager()
        manager.set(ActiveGame(user_id="idle", kind="riddle", payload=RIDDLES[0]))
        manager.set(ActiveGame(user_id="fresh", kind="riddle", payload=RIDDLES[1]))
        manager._games["idle"].last_active = now() - timedelta(hours=2)

        assert manager.cleanup_idle_games() == 1
        assert manager.active_count == 1
        assert manager._games.get("fresh") is not None

    @pytest.mark.asyncio
    async def test_cleanup_skips_locked_user(self):
        from common.utils.datetime import now
        from managers.game_state_manager import GameStateManager
        from storage.models.game import ActiveGame
        from storage.models.game_catalog import RIDDLES

        manager = GameStateManager()
        manager.set(ActiveGame(user_id="busy", kind="riddle", payload=RIDDLES[0]))
        manager._games["busy"].last_active = now() - timedelta(hours=2)

        async with manager.lock("busy"):
            assert manager.cleanup_idle_games() == 0
        assert manager.cleanup_idle_games() == 1
