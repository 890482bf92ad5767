"""Chat 接口 (SSE 流式)"""

import json
from typing import Any, AsyncGenerator, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from api.dependencies import get_engine, get_user_id
from api.schemas.chat import DetectEmotionRequest, SendMessageRequest
from api.schemas.common import BaseResponse
from common.logger import get_logger
from core.engine import STREAM_ERROR_MESSAGE, PreparedTurn, RubiEngine

logger = get_logger(__name__)

router = APIRouter()


def encode_event(event: Dict[str, Any]) -> str:
    """一帧 SSE：data: <json>\\n\\n"""
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"


async def _event_stream(turn: PreparedTurn) -> AsyncGenerator[str, None]:
    try:
        async for event in turn.events():
            yield encode_event(event)
    except Exception as e:
        # events() 自己会输出 error 帧；这里兜住意外情况，保证连接不会悬挂
        logger.error(f"Chat stream error: {e}", exc_info=True)
        yield encode_event({"error": STREAM_ERROR_MESSAGE})


@router.post("/conversations/{conversation_id}/messages")
async def send_message(
    conversation_id: str,
    body: SendMessageRequest,
    user_id: str = Depends(get_user_id),
    engine: RubiEngine = Depends(get_engine),
):
    """
    发送消息（SSE 流式响应）

    每帧 data 只含一种键:
    - emotion: 识别出的情绪（仅普通聊天，第一帧）
    - content: 回复内容片段（游戏回复只有一帧完整内容）
    - done: 成功结束
    - error: 失败结束

    流开始之前的失败（对话不存在、保存失败、LLM 不可用）直接返回 JSON 错误。
    """
    turn = await engine.begin_turn(
        user_id=user_id,
        conversation_id=conversation_id,
        message=body.content,
        model=body.model,
    )

    return StreamingResponse(
        _event_stream(turn),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post("/detect-emotion")
async def detect_emotion(
    body: DetectEmotionRequest,
    user_id: str = Depends(get_user_id),
    engine: RubiEngine = Depends(get_engine),
) -> BaseResponse:
    """识别一段文本的情绪（前端用来切换头像表情）"""
    emotion = engine.detect_emotion(body.content)
    return BaseResponse(data=emotion.model_dump(by_alias=True))
