"""FastAPI 入口"""

import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

# 添加项目根目录到 sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware.error_handler import register_error_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.routes import api_router
from common.config import settings
from common.logger import setup_logging, get_logger
from core.engine import RubiEngine

logger = get_logger(__name__)


def create_app(
    engine: Optional[RubiEngine] = None, configure_logging: bool = True
) -> FastAPI:
    """
    创建应用

    Args:
        engine: 预先组装好的引擎（测试时注入假的 LLM），为空则在启动时创建
        configure_logging: 是否安装 JSON 日志 handler
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用生命周期管理"""
        # 启动
        if configure_logging:
            setup_logging(settings.logging)
        logger.info("Starting Rubi...")

        app.state.engine = engine or RubiEngine()
        await app.state.engine.start()

        logger.info(f"Server running on {settings.host}:{settings.port}")
        yield

        # 关闭
        logger.info("Shutting down...")
        await app.state.engine.stop()

    app = FastAPI(
        title="Rubi",
        description="AI 秘书对话服务 - 情绪感知、小游戏与自动学习",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 请求日志
    app.add_middleware(RequestLoggingMiddleware)

    # 异常处理
    register_error_handlers(app)

    # 路由
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
