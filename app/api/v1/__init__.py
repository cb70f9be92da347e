"""API v1 module."""

from fastapi import APIRouter

from app.api.v1.routers import layout_router, order_router


# Create main v1 router
api_router = APIRouter(prefix="/api/v1")

# Include sub-routers
api_router.include_router(order_router)
api_router.include_router(layout_router)


__all__ = ["api_router"]
