"""Repository protocols and in-memory implementations."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol, Tuple, runtime_checkable

from app.persistence.models import RecordKind, StoredOrderRecord


class RevisionConflictError(Exception):
    """Save was based on a revision that is no longer current."""

    def __init__(self, scope_key: str, expected: int, current: int):
        self.scope_key = scope_key
        self.expected = expected
        self.current = current
        super().__init__(
            f"Record '{scope_key}' is at revision {current}, save was based on {expected}"
        )


def check_revision(scope_key: str, base_revision: Optional[int], current: Optional[StoredOrderRecord]) -> None:
    """
    Optimistic concurrency check shared by all implementations.

    A missing base_revision means last-write-wins. A missing record is at
    revision 0.
    """
    if base_revision is None:
        return
    current_revision = current.revision if current else 0
    if base_revision != current_revision:
        raise RevisionConflictError(scope_key, base_revision, current_revision)


@runtime_checkable
class OrderRecordRepository(Protocol):
    """Protocol for order/layout record storage."""

    async def get(self, kind: RecordKind, scope_key: str) -> Optional[StoredOrderRecord]:
        """Get the record for a scope, or None."""
        ...

    async def save(
        self,
        kind: RecordKind,
        scope_key: str,
        content: Any,
        base_revision: Optional[int] = None,
    ) -> StoredOrderRecord:
        """Create or replace the record for a scope. Raises RevisionConflictError."""
        ...

    async def delete(self, kind: RecordKind, scope_key: str) -> bool:
        """Delete the record for a scope. Returns True if deleted."""
        ...


class InMemoryOrderRecordRepository:
    """In-memory order record repository for development and testing."""

    def __init__(self):
        self._records: Dict[Tuple[str, str], StoredOrderRecord] = {}

    def _key(self, kind: RecordKind, scope_key: str) -> Tuple[str, str]:
        return (RecordKind(kind).value, scope_key)

    async def get(self, kind: RecordKind, scope_key: str) -> Optional[StoredOrderRecord]:
        """Get record by scope."""
        return self._records.get(self._key(kind, scope_key))

    async def save(
        self,
        kind: RecordKind,
        scope_key: str,
        content: Any,
        base_revision: Optional[int] = None,
    ) -> StoredOrderRecord:
        """Save a record, bumping its revision."""
        key = self._key(kind, scope_key)
        existing = self._records.get(key)
        check_revision(scope_key, base_revision, existing)

        if existing:
            existing.content = content
            existing.revision += 1
            existing.updated_at = datetime.now(timezone.utc)
            return existing

        record = StoredOrderRecord(kind=RecordKind(kind), scope_key=scope_key, content=content)
        self._records[key] = record
        return record

    async def delete(self, kind: RecordKind, scope_key: str) -> bool:
        """Delete a record."""
        return self._records.pop(self._key(kind, scope_key), None) is not None

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._records.clear()
