"""
Order store.

A persisted permutation of ids over the live item set, keyed by scope
(per user, per board...). The stored order is always reconciled against the
live ids before use:

- ids stored but no longer live are dropped
- live ids missing from the stored order are appended in natural order

The pure functions (reconcile, apply_move, validate_order_record) carry the
rules; OrderStore holds the local state for a session and talks to storage
through injected load/save callables.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from app.domain.arrangement.exceptions import MalformedOrderRecord, UnknownItemReference

logger = logging.getLogger(__name__)

LoadFn = Callable[[str], Any]
SaveFn = Callable[[str, List[str]], None]


def reconcile(stored_order: Sequence[str], live_ids: Iterable[str]) -> List[str]:
    """
    Merge a stored order with the live id set.

    Args:
        stored_order: previously persisted order (may be empty)
        live_ids: live ids in natural order

    Returns:
        Stored ids that are still live, in stored order, followed by the
        remaining live ids in their natural order. A permutation of live_ids.
    """
    live = list(dict.fromkeys(live_ids))
    live_set = set(live)

    result: List[str] = []
    placed = set()
    for item_id in stored_order:
        if item_id in live_set and item_id not in placed:
            result.append(item_id)
            placed.add(item_id)

    result.extend(item_id for item_id in live if item_id not in placed)
    return result


def dangling_ids(stored_order: Sequence[str], live_ids: Iterable[str]) -> List[str]:
    """Ids in the stored order that reconcile will drop."""
    live_set = set(live_ids)
    return [item_id for item_id in dict.fromkeys(stored_order) if item_id not in live_set]


def apply_move(order: Sequence[str], moved_id: str, new_index: int) -> List[str]:
    """
    Move one id to a new position.

    The index is clamped to [0, len - 1]. Moving to the current index
    returns an equal list.

    Raises:
        UnknownItemReference: if moved_id is not in order
    """
    result = list(order)
    try:
        current_index = result.index(moved_id)
    except ValueError:
        raise UnknownItemReference([moved_id], context="move")

    target = max(0, min(new_index, len(result) - 1))
    if target == current_index:
        return result

    result.pop(current_index)
    result.insert(target, moved_id)
    return result


def validate_order_record(raw: Any, scope_key: Optional[str] = None) -> Optional[List[str]]:
    """
    Check the shape of a stored order.

    Returns:
        The order as a list, or None when nothing (or an empty list) is stored.

    Raises:
        MalformedOrderRecord: not a list, or contains non-string/empty entries
    """
    if raw is None:
        return None
    if not isinstance(raw, (list, tuple)):
        raise MalformedOrderRecord(f"expected a list, got {type(raw).__name__}", scope_key)

    for position, entry in enumerate(raw):
        if not isinstance(entry, str) or not entry:
            raise MalformedOrderRecord(
                f"entry {position} is not a non-empty string: {entry!r}",
                scope_key,
            )

    if not raw:
        return None
    return list(raw)


class OrderStore:
    """
    Session-local order state with injected storage.

    One instance per session, passed around by reference. All mutations are
    synchronous; `save` is expected to hand the snapshot to something that
    pushes it out of band (see app.sync.SyncCoordinator).
    """

    def __init__(self, load: Optional[LoadFn] = None, save: Optional[SaveFn] = None):
        self._load = load
        self._save = save
        self._orders: Dict[str, List[str]] = {}

    def load_order(self, scope_key: str, live_ids: Iterable[str]) -> List[str]:
        """
        Load the stored order for a scope and reconcile it with the live ids.

        Storage is only read the first time a scope is loaded; later calls
        reconcile the local order (which may hold unconfirmed moves) against
        the new live ids. A corrupt stored order is treated as absent and
        logged; it never raises to the caller.
        """
        live = list(live_ids)
        if scope_key in self._orders:
            raw = self._orders[scope_key]
        else:
            raw = self._load(scope_key) if self._load else None

        try:
            stored = validate_order_record(raw, scope_key) or []
        except MalformedOrderRecord as e:
            logger.warning(f"{e.message}; falling back to natural order")
            stored = []

        dropped = dangling_ids(stored, live)
        if dropped:
            logger.debug(f"Dropping {len(dropped)} dangling ids from '{scope_key}': {dropped}")

        order = reconcile(stored, live)
        self._orders[scope_key] = order
        return list(order)

    def get(self, scope_key: str) -> Optional[List[str]]:
        """Current local order for a scope, or None if never loaded."""
        order = self._orders.get(scope_key)
        return list(order) if order is not None else None

    def set_order(self, scope_key: str, order: Sequence[str]) -> List[str]:
        """Replace the local order and save it."""
        self._orders[scope_key] = list(order)
        self._persist(scope_key)
        return list(order)

    def move(self, scope_key: str, moved_id: str, new_index: int) -> List[str]:
        """Apply a move to the local order. Saves only when the order changed."""
        current = self._orders.get(scope_key, [])
        updated = apply_move(current, moved_id, new_index)
        if updated != current:
            self._orders[scope_key] = updated
            self._persist(scope_key)
        return list(updated)

    def reset(self, scope_key: str) -> None:
        """Forget the user's arrangement. An empty stored order means natural order."""
        self._orders[scope_key] = []
        if self._save:
            self._save(scope_key, [])

    def _persist(self, scope_key: str) -> None:
        if self._save:
            self._save(scope_key, list(self._orders[scope_key]))
