from api.schemas.common import BaseResponse, ErrorResponse
from api.schemas.chat import DetectEmotionRequest, SendMessageRequest
from api.schemas.conversation import (
    ConversationDetailResponse,
    ConversationResponse,
    CreateConversationRequest,
)
from api.schemas.preferences import PreferencesResponse, UpdatePreferencesRequest

__all__ = [
    "BaseResponse",
    "ErrorResponse",
    "DetectEmotionRequest",
    "SendMessageRequest",
    "ConversationDetailResponse",
    "ConversationResponse",
    "CreateConversationRequest",
    "PreferencesResponse",
    "UpdatePreferencesRequest",
]
