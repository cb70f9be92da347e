"""Persistence sync: HTTP adapter, push coordination and store seeding."""

from app.sync.adapter import (
    Ack,
    PersistenceSyncAdapter,
    PullResult,
    SyncError,
    SyncErrorKind,
    SyncResult,
)
from app.sync.coordinator import SyncCoordinator
from app.sync.session import open_order_store

__all__ = [
    "Ack",
    "SyncError",
    "SyncErrorKind",
    "SyncResult",
    "PullResult",
    "PersistenceSyncAdapter",
    "SyncCoordinator",
    "open_order_store",
]
