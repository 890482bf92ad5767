"""RubiEngine - 主引擎入口"""

import asyncio
from typing import Any, AsyncGenerator, AsyncIterator, Dict, Optional, Set

from common.config import settings
from common.exceptions import InputValidationError, RubiBaseError
from common.logger import get_logger
from core.graph.nodes.extract_learnings import extract_learnings
from core.graph.nodes.post_process import post_process
from core.graph.state import TurnState
from core.graph.workflow import build_turn_workflow
from managers.game_state_manager import GameStateManager
from managers.gamification_manager import GamificationManager
from services.emotion_service import EmotionResult, detect_emotion
from services.game_service import GameService
from services.generation_service import GenerationService
from services.learning_service import LearningService
from services.llm_service import LLMService
from services.prompt_service import PromptService
from storage.repositories.conversation_repository import ConversationRepository
from storage.repositories.gamification_repository import GamificationRepository
from storage.repositories.preferences_repository import PreferencesRepository

logger = get_logger(__name__)

# 流式过程中出错时发给客户端的文案
STREAM_ERROR_MESSAGE = (
    "An error occurred while processing your message. Please try again."
)


class PreparedTurn:
    """
    准备完毕的一轮对话。

    begin_turn() 返回它时，所有可能以 JSON 错误返回的失败都已经发生过了；
    events() 产生的事件按 emotion → content* → done|error 的顺序输出。
    """

    def __init__(
        self,
        engine: "RubiEngine",
        state: Dict[str, Any],
        stream: Optional[AsyncIterator[str]] = None,
    ):
        self._engine = engine
        self.state = state
        self._stream = stream

    @property
    def is_game(self) -> bool:
        return self._stream is None

    async def events(self) -> AsyncGenerator[Dict[str, Any], None]:
        """
        Yields:
            {"emotion": {...}} 仅聊天分支，第一个
            {"content": str}   文本增量（游戏分支只有一条完整回复）
            {"done": True}     成功结束
            {"error": str}     失败结束，与 done 互斥
        """
        if self.is_game:
            yield {"content": self.state["reply"]}
            yield {"done": True}
            return

        emotion: EmotionResult = self.state["emotion"]
        yield {"emotion": emotion.model_dump(by_alias=True)}

        log_extra = {
            "user_id": self.state["user_id"],
            "conversation_id": self.state["conversation_id"],
        }

        # ── 流式生成 ─────────────────────────────────────
        full_response = ""
        try:
            async for delta in self._stream:
                full_response += delta
                yield {"content": delta}
        except Exception as e:
            # 半截回复不保存
            logger.error(f"Stream generation error: {e}", exc_info=True, extra=log_extra)
            yield {"error": STREAM_ERROR_MESSAGE}
            return

        # ── 保存回复 ─────────────────────────────────────
        final_state = {**self.state, "response": full_response}
        try:
            await post_process(final_state, **self._engine.deps)
        except Exception as e:
            logger.error(f"Failed to save reply: {e}", exc_info=True, extra=log_extra)
            yield {"error": STREAM_ERROR_MESSAGE}
            return

        yield {"done": True}

        # ── 后台学习 ─────────────────────────────────────
        # 客户端读完 done 之后生成器才会走到这里
        self._engine.schedule_background(final_state)


class RubiEngine:
    """Rubi 主引擎"""

    def __init__(
        self,
        llm_service: Optional[LLMService] = None,
        conversation_repo: Optional[ConversationRepository] = None,
        preferences_repo: Optional[PreferencesRepository] = None,
        gamification_manager: Optional[GamificationManager] = None,
        game_service: Optional[GameService] = None,
        prompt_service: Optional[PromptService] = None,
    ):
        # Services
        self.llm_service = llm_service or LLMService()

        # Repositories / Managers
        self.conversation_repo = conversation_repo or ConversationRepository()
        self.preferences_repo = preferences_repo or PreferencesRepository()
        self.gamification_manager = gamification_manager or GamificationManager(
            GamificationRepository()
        )
        self.game_service = game_service or GameService(GameStateManager())

        # Services (依赖 managers)
        self.prompt_service = prompt_service or PromptService()
        self.generation_service = GenerationService(self.llm_service)
        self.learning_service = LearningService(self.llm_service)

        # 工作流
        self._turn_graph = None
        self.deps: Dict[str, Any] = {}

        # 后台任务需要持有引用，否则可能被回收
        self._background_tasks: Set[asyncio.Task] = set()

    async def start(self) -> None:
        """启动引擎"""
        logger.info("Starting RubiEngine...")

        await self.game_service.state.start()

        self.deps = {
            "llm_service": self.llm_service,
            "conversation_repo": self.conversation_repo,
            "preferences_repo": self.preferences_repo,
            "gamification_manager": self.gamification_manager,
            "game_service": self.game_service,
            "prompt_service": self.prompt_service,
            "generation_service": self.generation_service,
            "learning_service": self.learning_service,
        }
        self._turn_graph = build_turn_workflow(self.deps).compile()

        logger.info("RubiEngine started successfully")

    async def stop(self) -> None:
        """停止引擎"""
        logger.info("Stopping RubiEngine...")
        await self.game_service.state.stop()
        await self.drain_background(timeout=5)
        logger.info("RubiEngine stopped")

    def detect_emotion(self, text: str) -> EmotionResult:
        return detect_emotion(text)

    async def begin_turn(
        self,
        user_id: str,
        conversation_id: str,
        message: str,
        model: Optional[str] = None,
    ) -> PreparedTurn:
        """
        处理一轮对话中流式输出之前的全部工作：

        1. 校验输入（无副作用）
        2. 运行准备工作流（校验归属、情绪、保存用户消息、游戏化、游戏分支或组装 prompt）
        3. 聊天分支发起流式请求

        这里抛出的异常都发生在响应头写出之前，由调用方转为 JSON 错误。
        """
        if self._turn_graph is None:
            raise RubiBaseError("RubiEngine not started. Call start() first.")

        if not message or not message.strip():
            raise InputValidationError("Message content is required")
        if len(message) > settings.chat.max_message_length:
            raise InputValidationError(
                "Message content is too long",
                detail=f"max {settings.chat.max_message_length} characters",
            )
        if model and model not in settings.llm.available_models:
            raise InputValidationError("Unknown model", detail=model)

        initial_state = self._build_initial_state(user_id, conversation_id, message, model)
        state = await self._turn_graph.ainvoke(initial_state)

        if state.get("reply") is not None:
            return PreparedTurn(self, state)

        stream = await self.generation_service.open_stream(
            system_prompt=state["system_prompt"],
            messages=state["history"],
            model=state.get("model"),
        )
        return PreparedTurn(self, state, stream)

    # ── 辅助方法 ────────────────────────────────────────────

    def _build_initial_state(
        self,
        user_id: str,
        conversation_id: str,
        message: str,
        model: Optional[str],
    ) -> TurnState:
        """构建初始 TurnState"""
        return {
            "user_id": user_id,
            "conversation_id": conversation_id,
            "user_message": message,
            "model": model or settings.llm.default_model,
            "preferences": None,
            "had_messages": False,
            "emotion": None,
            "has_active_game": False,
            "is_game_command": False,
            "branch": "chat",
            "reply": None,
            "game_result": None,
            "history": [],
            "system_prompt": "",
        }

    def schedule_background(self, state: Dict[str, Any]) -> asyncio.Task:
        """启动后台学习，不等待结果"""
        task = asyncio.create_task(self._background_post_process(state))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    async def drain_background(self, timeout: Optional[float] = None) -> None:
        """等待进行中的后台任务；超时未完成的直接放弃"""
        if not self._background_tasks:
            return
        _, pending = await asyncio.wait(set(self._background_tasks), timeout=timeout)
        if pending:
            logger.warning(f"Dropping {len(pending)} unfinished background tasks")

    async def _background_post_process(self, state: Dict[str, Any]) -> None:
        """后台执行学习提取；失败只记日志"""
        try:
            await extract_learnings(state, **self.deps)
        except Exception as e:
            logger.error(
                "Background learning failed: %s", e, exc_info=True,
                extra={"user_id": state.get("user_id")},
            )

    @property
    def active_games(self) -> int:
        return self.game_service.state.active_count

    @property
    def background_task_count(self) -> int:
        return len(self._background_tasks)
