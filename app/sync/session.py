"""Initialization glue between the sync adapter and an order store."""

import logging
from typing import Dict, Iterable, Optional, Tuple

from app.domain.arrangement.order_store import OrderStore
from app.sync.adapter import PersistenceSyncAdapter, SyncError
from app.sync.coordinator import SyncCoordinator

logger = logging.getLogger(__name__)


async def open_order_store(
    adapter: PersistenceSyncAdapter,
    scope_keys: Iterable[str],
    coordinator: Optional[SyncCoordinator] = None,
) -> Tuple[OrderStore, Dict[str, SyncError]]:
    """
    Seed an OrderStore from the persistence API.

    Each scope is pulled once. Scopes that fail to pull start from natural
    order; their errors are returned so the caller can decide what to show.
    Saves go through the coordinator when one is given.

    Returns:
        (order_store, {scope_key: SyncError} for failed pulls)
    """
    snapshots = {}
    errors: Dict[str, SyncError] = {}

    for scope_key in scope_keys:
        result = await adapter.pull(scope_key)
        if isinstance(result, SyncError):
            errors[scope_key] = result
            continue
        snapshots[scope_key] = result

    if errors:
        logger.warning(f"Could not pull {len(errors)} scope(s): {sorted(errors)}")

    save = coordinator.schedule if coordinator is not None else None
    return OrderStore(load=snapshots.get, save=save), errors
