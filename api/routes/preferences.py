"""用户偏好接口"""

from fastapi import APIRouter, Depends

from api.dependencies import get_engine, get_user_id
from api.schemas.common import BaseResponse
from api.schemas.preferences import PreferencesResponse, UpdatePreferencesRequest
from core.engine import RubiEngine

router = APIRouter()


@router.get("/preferences")
async def get_preferences(
    user_id: str = Depends(get_user_id),
    engine: RubiEngine = Depends(get_engine),
) -> BaseResponse:
    """获取偏好（没有记录时返回默认值）"""
    prefs = await engine.preferences_repo.get_or_default(user_id)
    return BaseResponse(data=PreferencesResponse.from_model(prefs).model_dump(mode="json"))


@router.patch("/preferences")
async def update_preferences(
    body: UpdatePreferencesRequest,
    user_id: str = Depends(get_user_id),
    engine: RubiEngine = Depends(get_engine),
) -> BaseResponse:
    """修改回复模式、沟通风格、喜欢的话题"""
    fields = body.model_dump(exclude_none=True)
    if "favorite_topics" in fields:
        topics = [t.strip() for t in fields["favorite_topics"] if t.strip()]
        fields["favorite_topics"] = list(dict.fromkeys(topics))
    prefs = await engine.preferences_repo.upsert(user_id, **fields)
    return BaseResponse(
        message="Preferences updated",
        data=PreferencesResponse.from_model(prefs).model_dump(mode="json"),
    )
