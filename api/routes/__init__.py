from fastapi import APIRouter

from api.routes.chat import router as chat_router
from api.routes.conversations import router as conversations_router
from api.routes.gamification import router as gamification_router
from api.routes.preferences import router as preferences_router
from api.routes.system import router as system_router

api_router = APIRouter(prefix="/api")

api_router.include_router(system_router, tags=["system"])
api_router.include_router(conversations_router, tags=["conversations"])
api_router.include_router(chat_router, tags=["chat"])
api_router.include_router(preferences_router, tags=["preferences"])
api_router.include_router(gamification_router, tags=["gamification"])
