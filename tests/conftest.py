"""测试配置"""

import json
import random
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# 添加项目根目录到 sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


async def fake_stream(chunks, error=None):
    """模拟 LLM 流：依次产出 chunks，可选在最后抛出 error"""
    for chunk in chunks:
        yield chunk
    if error is not None:
        raise error


@asynccontextmanager
async def running(engine):
    """启动引擎，退出时等待后台任务并停止"""
    await engine.start()
    try:
        yield engine
    finally:
        await engine.stop()


async def collect(turn):
    """读完一轮的全部事件"""
    return [event async for event in turn.events()]


@pytest.fixture
def data_dir(tmp_path):
    """每个测试独立的数据目录"""
    return tmp_path / "rubi_data"


@pytest.fixture
def mock_llm_service():
    """Mock LLM 服务"""
    service = AsyncMock()
    service.generate.return_value = "这是一个模拟的回复"
    service.open_stream.side_effect = lambda **kwargs: fake_stream(
        ["Hello ", "there, ", "friend!"]
    )
    service.extract.return_value = json.dumps(
        {"topics": ["python"], "preferences": [], "facts": ["lives in Madrid"], "interests": []}
    )
    return service


@pytest.fixture
def conversation_repo(data_dir):
    from storage.repositories.conversation_repository import ConversationRepository

    return ConversationRepository(base_dir=data_dir)


@pytest.fixture
def preferences_repo(data_dir):
    from storage.repositories.preferences_repository import PreferencesRepository

    return PreferencesRepository(base_dir=data_dir)


@pytest.fixture
def gamification_manager(data_dir):
    from managers.gamification_manager import GamificationManager
    from storage.repositories.gamification_repository import GamificationRepository

    return GamificationManager(GamificationRepository(base_dir=data_dir))


@pytest.fixture
def game_service():
    """固定随机种子的游戏服务"""
    from managers.game_state_manager import GameStateManager
    from services.game_service import GameService

    return GameService(GameStateManager(), rng=random.Random(7))


@pytest.fixture
def engine(
    mock_llm_service,
    conversation_repo,
    preferences_repo,
    gamification_manager,
    game_service,
):
    """用假 LLM 和临时目录组装的引擎（未启动）"""
    from core.engine import RubiEngine
    from services.prompt_service import PromptService

    return RubiEngine(
        llm_service=mock_llm_service,
        conversation_repo=conversation_repo,
        preferences_repo=preferences_repo,
        gamification_manager=gamification_manager,
        game_service=game_service,
        prompt_service=PromptService(persona="You are Rubi, a test assistant."),
    )
