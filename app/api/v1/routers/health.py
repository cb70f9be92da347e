"""
Health check endpoint.

Liveness only: confirms the app is running without touching storage.
"""
from fastapi import APIRouter, status

from app.api.v1.schemas.common import HealthResponse
from app.core.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def liveness_check() -> HealthResponse:
    """Simple liveness check for container probes."""
    return HealthResponse(status="healthy", version=get_settings().app_version)
