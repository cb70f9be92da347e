"""API v1 schemas."""

from app.api.v1.schemas.arrangement import (
    LayoutPushRequest,
    LayoutRecordResponse,
    LayoutState,
    LayoutWidget,
    OrderPushRequest,
    OrderRecordResponse,
    PushAckResponse,
)
from app.api.v1.schemas.common import ErrorResponse, HealthResponse

__all__ = [
    "OrderPushRequest",
    "OrderRecordResponse",
    "LayoutWidget",
    "LayoutState",
    "LayoutPushRequest",
    "LayoutRecordResponse",
    "PushAckResponse",
    "ErrorResponse",
    "HealthResponse",
]
