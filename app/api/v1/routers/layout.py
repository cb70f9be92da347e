"""Dashboard layout API router.

- GET  /api/v1/layout?scope=<key> - Stored widget layout
- POST /api/v1/layout             - Save widget layout
"""

import logging

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import get_order_repository
from app.api.v1.exceptions import InvalidPayloadError, RecordNotFoundError, StaleRevisionError
from app.api.v1.schemas.arrangement import (
    LayoutPushRequest,
    LayoutRecordResponse,
    LayoutState,
    PushAckResponse,
)
from app.api.v1.services.arrangement_pure import layout_problems
from app.persistence.models import RecordKind
from app.persistence.repositories import OrderRecordRepository, RevisionConflictError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/layout", tags=["layout"])


@router.get("", response_model=LayoutRecordResponse)
async def get_layout(
    scope: str = Query(..., min_length=1, max_length=255),
    repository: OrderRecordRepository = Depends(get_order_repository),
) -> LayoutRecordResponse:
    """Get the stored widget layout for a scope."""
    record = await repository.get(RecordKind.LAYOUT, scope)
    if record is None:
        raise RecordNotFoundError("layout", scope)

    return LayoutRecordResponse(
        scope=record.scope_key,
        layout=LayoutState.model_validate(record.content),
        revision=record.revision,
        updated_at=record.updated_at,
    )


@router.post("", response_model=PushAckResponse)
async def save_layout(
    request: LayoutPushRequest,
    repository: OrderRecordRepository = Depends(get_order_repository),
) -> PushAckResponse:
    """Save the widget layout for a scope."""
    problems = layout_problems(request.layout)
    if problems:
        raise InvalidPayloadError("Layout is inconsistent", problems)

    try:
        record = await repository.save(
            RecordKind.LAYOUT,
            request.scope,
            request.layout.model_dump(),
            base_revision=request.base_revision,
        )
    except RevisionConflictError as e:
        raise StaleRevisionError(e.scope_key, e.expected, e.current)

    logger.info(f"Saved layout for '{request.scope}' at revision {record.revision}")
    return PushAckResponse(scope=record.scope_key, revision=record.revision, updated_at=record.updated_at)
