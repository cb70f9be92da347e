"""Services for API layer."""

from app.api.v1.services.arrangement_pure import layout_problems, order_problems

__all__ = [
    "order_problems",
    "layout_problems",
]
