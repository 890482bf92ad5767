"""通用 Schema"""

from typing import Any, Optional

from pydantic import BaseModel

from common.exceptions import RubiBaseError


class BaseResponse(BaseModel):
    """基础响应"""

    success: bool = True
    message: str = ""
    data: Optional[Any] = None


class ErrorResponse(BaseModel):
    """错误响应（HTTP 错误和流式之前的失败都用这个结构）"""

    success: bool = False
    error: str = ""
    detail: str = ""

    @classmethod
    def from_exception(cls, exc: RubiBaseError) -> "ErrorResponse":
        return cls(error=exc.message, detail=exc.detail)
