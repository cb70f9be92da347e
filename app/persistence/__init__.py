"""Persistence module: order and layout records."""

from app.persistence.models import (
    RecordKind,
    StoredOrderRecord,
)
from app.persistence.repositories import (
    OrderRecordRepository,
    InMemoryOrderRecordRepository,
    RevisionConflictError,
)

__all__ = [
    # Models
    "RecordKind",
    "StoredOrderRecord",
    # Protocols
    "OrderRecordRepository",
    # In-memory implementations
    "InMemoryOrderRecordRepository",
    # Exceptions
    "RevisionConflictError",
]
