"""Order record API router.

Stores a user's arrangement (ordered id list) per scope:
- GET    /api/v1/order?scope=<key>  - Stored order
- POST   /api/v1/order              - Save order (optional base_revision)
- DELETE /api/v1/order?scope=<key>  - Reset to natural order
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.v1.dependencies import get_order_repository
from app.api.v1.exceptions import InvalidPayloadError, RecordNotFoundError, StaleRevisionError
from app.api.v1.schemas.arrangement import OrderPushRequest, OrderRecordResponse, PushAckResponse
from app.api.v1.services.arrangement_pure import order_problems
from app.persistence.models import RecordKind
from app.persistence.repositories import OrderRecordRepository, RevisionConflictError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/order", tags=["order"])


@router.get("", response_model=OrderRecordResponse)
async def get_order(
    scope: str = Query(..., min_length=1, max_length=255, description="Scope key"),
    repository: OrderRecordRepository = Depends(get_order_repository),
) -> OrderRecordResponse:
    """Get the stored order for a scope."""
    record = await repository.get(RecordKind.ORDER, scope)
    if record is None:
        raise RecordNotFoundError("order_record", scope)

    return OrderRecordResponse(
        scope=record.scope_key,
        order=record.order,
        revision=record.revision,
        updated_at=record.updated_at,
    )


@router.post("", response_model=PushAckResponse)
async def save_order(
    request: OrderPushRequest,
    repository: OrderRecordRepository = Depends(get_order_repository),
) -> PushAckResponse:
    """Save the order for a scope.

    Returns:
        The new revision. 400 for empty or duplicate ids, 409 when
        base_revision is stale.
    """
    problems = order_problems(request.order)
    if problems:
        raise InvalidPayloadError("Order contains invalid ids", problems)

    try:
        record = await repository.save(
            RecordKind.ORDER,
            request.scope,
            list(request.order),
            base_revision=request.base_revision,
        )
    except RevisionConflictError as e:
        raise StaleRevisionError(e.scope_key, e.expected, e.current)

    logger.info(f"Saved order for '{request.scope}' at revision {record.revision} ({len(request.order)} ids)")
    return PushAckResponse(scope=record.scope_key, revision=record.revision, updated_at=record.updated_at)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def reset_order(
    scope: str = Query(..., min_length=1, max_length=255),
    repository: OrderRecordRepository = Depends(get_order_repository),
) -> Response:
    """Forget the stored order; clients fall back to natural order."""
    if not await repository.delete(RecordKind.ORDER, scope):
        raise RecordNotFoundError("order_record", scope)
    logger.info(f"Reset order for '{scope}'")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
