"""API routers."""

from app.api.v1.routers.health import router as health_router
from app.api.v1.routers.layout import router as layout_router
from app.api.v1.routers.order import router as order_router


__all__ = [
    "health_router",
    "layout_router",
    "order_router",
]
