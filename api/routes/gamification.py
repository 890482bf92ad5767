"""游戏化接口"""

from fastapi import APIRouter, Depends

from api.dependencies import get_engine, get_user_id
from api.schemas.common import BaseResponse
from core.engine import RubiEngine

router = APIRouter(prefix="/gamification")


@router.get("/stats")
async def get_stats(
    user_id: str = Depends(get_user_id),
    engine: RubiEngine = Depends(get_engine),
) -> BaseResponse:
    """积分、等级进度、连续打卡"""
    return BaseResponse(data=await engine.gamification_manager.get_stats(user_id))


@router.get("/achievements")
async def get_achievements(
    user_id: str = Depends(get_user_id),
    engine: RubiEngine = Depends(get_engine),
) -> BaseResponse:
    """全部成就及进度"""
    return BaseResponse(data=await engine.gamification_manager.list_achievements(user_id))


@router.get("/challenges")
async def get_challenges(
    user_id: str = Depends(get_user_id),
    engine: RubiEngine = Depends(get_engine),
) -> BaseResponse:
    """今日挑战（没有则生成）"""
    challenges = await engine.gamification_manager.generate_daily_challenges(user_id)
    return BaseResponse(data=[c.model_dump(mode="json") for c in challenges])
