"""请求日志中间件"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from common.logger import bind_request_context, get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    请求日志中间件

    request_id / user_id 绑定到请求上下文，引擎和节点里的日志自动带上。
    流式响应在这里只记录到响应头发出为止。
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        start_time = time.time()

        request.state.request_id = request_id
        bind_request_context(
            request_id=request_id,
            user_id=request.headers.get("X-User-Id", "").strip(),
        )

        logger.info(f"Request start: {request.method} {request.url.path}")

        response = await call_next(request)

        duration = time.time() - start_time
        logger.info(
            f"Request end: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s"
        )

        response.headers["X-Request-ID"] = request_id
        return response
