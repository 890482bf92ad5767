"""对话接口"""

from fastapi import APIRouter, Depends, Response

from api.dependencies import get_engine, get_user_id
from api.schemas.common import BaseResponse
from api.schemas.conversation import (
    ConversationDetailResponse,
    ConversationResponse,
    CreateConversationRequest,
)
from common.exceptions import ConversationNotFoundError
from core.engine import RubiEngine
from storage.models.message import Conversation

router = APIRouter()


async def _get_owned(engine: RubiEngine, conversation_id: str, user_id: str) -> Conversation:
    """不存在和不属于当前用户都返回 404"""
    conversation = await engine.conversation_repo.get(conversation_id)
    if conversation is None or conversation.user_id != user_id:
        raise ConversationNotFoundError("Conversation not found", detail=conversation_id)
    return conversation


@router.get("/conversations")
async def list_conversations(
    user_id: str = Depends(get_user_id),
    engine: RubiEngine = Depends(get_engine),
) -> BaseResponse:
    """当前用户的对话列表（最新在前）"""
    conversations = await engine.conversation_repo.list_by_user(user_id)
    return BaseResponse(
        data=[ConversationResponse.from_model(c).model_dump(mode="json") for c in conversations]
    )


@router.post("/conversations", status_code=201)
async def create_conversation(
    body: CreateConversationRequest,
    user_id: str = Depends(get_user_id),
    engine: RubiEngine = Depends(get_engine),
) -> BaseResponse:
    """新建对话"""
    conversation = await engine.conversation_repo.create(
        user_id, title=body.title or "New Chat"
    )
    return BaseResponse(
        message="Conversation created",
        data=ConversationResponse.from_model(conversation).model_dump(mode="json"),
    )


@router.get("/conversations/{conversation_id}")
async def get_conversation(
    conversation_id: str,
    user_id: str = Depends(get_user_id),
    engine: RubiEngine = Depends(get_engine),
) -> BaseResponse:
    """对话详情（含消息）"""
    conversation = await _get_owned(engine, conversation_id, user_id)
    return BaseResponse(
        data=ConversationDetailResponse.from_model(conversation).model_dump(mode="json")
    )


@router.delete("/conversations/{conversation_id}", status_code=204)
async def delete_conversation(
    conversation_id: str,
    user_id: str = Depends(get_user_id),
    engine: RubiEngine = Depends(get_engine),
) -> Response:
    """删除对话及其全部消息"""
    await _get_owned(engine, conversation_id, user_id)
    await engine.conversation_repo.delete(conversation_id)
    return Response(status_code=204)
