"""路由依赖"""

from fastapi import Header, HTTPException, Request

from core.engine import RubiEngine


async def get_user_id(x_user_id: str = Header(default="")) -> str:
    """调用方身份由上游网关通过 X-User-Id 传入；认证本身不在本服务内"""
    user_id = x_user_id.strip()
    if not user_id or "/" in user_id or "\\" in user_id or user_id.startswith("."):
        raise HTTPException(status_code=401, detail="Missing or invalid X-User-Id header")
    return user_id


def get_engine(request: Request) -> RubiEngine:
    return request.app.state.engine
