"""PostgreSQL repository implementations."""

from datetime import datetime, timezone
from typing import Any, Callable, Optional

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.persistence.models import RecordKind, StoredOrderRecord
from app.persistence.orm import OrderRecordORM
from app.persistence.repositories import check_revision


def _orm_to_stored_record(orm_record: OrderRecordORM) -> StoredOrderRecord:
    """Convert ORM row to StoredOrderRecord domain model."""
    return StoredOrderRecord(
        kind=RecordKind(orm_record.kind),
        scope_key=orm_record.scope_key,
        content=orm_record.content,
        revision=orm_record.revision,
        created_at=orm_record.created_at,
        updated_at=orm_record.updated_at,
        record_id=orm_record.id,
    )


def _stored_to_orm_record(
    stored: StoredOrderRecord,
    orm_record: Optional[OrderRecordORM] = None,
) -> OrderRecordORM:
    """Convert StoredOrderRecord to ORM row."""
    if orm_record is None:
        orm_record = OrderRecordORM()

    orm_record.kind = stored.kind.value
    orm_record.scope_key = stored.scope_key
    orm_record.content = stored.content
    orm_record.revision = stored.revision
    orm_record.created_at = stored.created_at
    orm_record.updated_at = stored.updated_at

    return orm_record


class PostgresOrderRecordRepository:
    """PostgreSQL implementation of OrderRecordRepository."""

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        """
        Initialize repository.

        Args:
            session_factory: Callable that returns an AsyncSession
        """
        self._session_factory = session_factory

    def _where(self, kind: RecordKind, scope_key: str):
        return and_(
            OrderRecordORM.kind == RecordKind(kind).value,
            OrderRecordORM.scope_key == scope_key,
        )

    async def get(self, kind: RecordKind, scope_key: str) -> Optional[StoredOrderRecord]:
        """Get record by scope."""
        async with self._session_factory() as session:
            result = await session.execute(select(OrderRecordORM).where(self._where(kind, scope_key)))
            orm_record = result.scalar_one_or_none()
            if orm_record is None:
                return None
            return _orm_to_stored_record(orm_record)

    async def save(
        self,
        kind: RecordKind,
        scope_key: str,
        content: Any,
        base_revision: Optional[int] = None,
    ) -> StoredOrderRecord:
        """Create or replace a record, bumping its revision."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(OrderRecordORM).where(self._where(kind, scope_key)).with_for_update()
            )
            existing = result.scalar_one_or_none()
            check_revision(
                scope_key,
                base_revision,
                _orm_to_stored_record(existing) if existing else None,
            )

            now = datetime.now(timezone.utc)
            if existing:
                stored = _orm_to_stored_record(existing)
                stored.content = content
                stored.revision += 1
                stored.updated_at = now
                orm_record = _stored_to_orm_record(stored, existing)
            else:
                stored = StoredOrderRecord(
                    kind=RecordKind(kind),
                    scope_key=scope_key,
                    content=content,
                    created_at=now,
                    updated_at=now,
                )
                orm_record = _stored_to_orm_record(stored)
                session.add(orm_record)

            await session.commit()
            await session.refresh(orm_record)

            return _orm_to_stored_record(orm_record)

    async def delete(self, kind: RecordKind, scope_key: str) -> bool:
        """Delete a record."""
        async with self._session_factory() as session:
            result = await session.execute(delete(OrderRecordORM).where(self._where(kind, scope_key)))
            await session.commit()
            return result.rowcount > 0


def create_repository(
    session_factory: Optional[Callable[[], AsyncSession]],
    use_postgres: bool = True,
):
    """
    Create the order record repository.

    Args:
        session_factory: Session factory for PostgreSQL
        use_postgres: If True, use PostgreSQL; if False, use in-memory

    Returns:
        OrderRecordRepository implementation
    """
    if use_postgres:
        return PostgresOrderRecordRepository(session_factory)

    from app.persistence.repositories import InMemoryOrderRecordRepository
    return InMemoryOrderRecordRepository()
