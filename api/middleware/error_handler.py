"""全局异常处理中间件"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.schemas.common import ErrorResponse
from common.exceptions import (
    RubiBaseError,
    InputValidationError,
    NotFoundError,
    LLMError,
    PersistenceError,
)
from common.logger import get_logger

logger = get_logger(__name__)


def _error(status_code: int, error: str, detail: str = "") -> JSONResponse:
    return _respond(status_code, ErrorResponse(error=error, detail=detail))


def _respond(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_error_handlers(app: FastAPI) -> None:
    """注册全局异常处理器"""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        detail = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in errors
        )
        return _error(400, "Invalid request data", detail)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(InputValidationError)
    async def input_validation_handler(request: Request, exc: InputValidationError):
        return _respond(400, ErrorResponse.from_exception(exc))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _respond(404, ErrorResponse.from_exception(exc))

    @app.exception_handler(LLMError)
    async def llm_error_handler(request: Request, exc: LLMError):
        logger.error(f"LLM Error: {exc.message} ({exc.detail})")
        return _error(503, "LLM service unavailable", exc.message)

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error(f"Persistence Error: {exc.message} ({exc.detail})")
        return _respond(500, ErrorResponse.from_exception(exc))

    @app.exception_handler(RubiBaseError)
    async def rubi_error_handler(request: Request, exc: RubiBaseError):
        logger.error(f"Rubi Error: {exc.message}")
        return _respond(500, ErrorResponse.from_exception(exc))

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error: {exc}", exc_info=True)
        return _error(500, "Internal server error", str(exc))
