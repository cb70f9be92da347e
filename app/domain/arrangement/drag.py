"""
Drag-reorder engine.

A state machine over one gesture, fed by a normalized event stream:

    drag_start(id) -> drag_over(over_id)* -> drag_end(over_id | None)
                                          -> drag_cancel()

drag_over is advisory: it only records the preview target and never touches
the board. The board is mutated once, on drag_end, and only if the drop is
valid; an invalid drop is handled exactly like a cancel.

Which element is "under the pointer" is decided by an injectable target
policy, so the reorder rules do not depend on any gesture library.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from app.domain.arrangement.board import Board
from app.domain.arrangement.exceptions import InvalidDragTarget
from app.domain.arrangement.models import DropKind, DropResult, EntityKind
from app.domain.arrangement.order_store import OrderStore

logger = logging.getLogger(__name__)


class DragPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass
class DropTarget:
    """A resolved drop target on the board."""
    id: str
    kind: EntityKind
    group_id: Optional[str]
    index: Optional[int] = None


TargetPolicy = Callable[[Optional[str], Board], Optional[DropTarget]]
CommitListener = Callable[[DropResult, Board], None]


def direct_target(over_id: Optional[str], board: Board) -> Optional[DropTarget]:
    """Resolve the id reported by the gesture source straight against the board."""
    if over_id is None:
        return None

    kind = board.kind_of(over_id)
    if kind is EntityKind.GROUP:
        return DropTarget(id=over_id, kind=kind, group_id=over_id)
    if kind is EntityKind.ITEM:
        group_id = board.group_of(over_id)
        return DropTarget(
            id=over_id,
            kind=kind,
            group_id=group_id,
            index=board.container(group_id).index(over_id),
        )
    return None


class DragController:
    """Turns gesture events into board mutations."""

    def __init__(
        self,
        board: Board,
        resolve_target: TargetPolicy = direct_target,
        on_commit: Optional[CommitListener] = None,
    ):
        self.board = board
        self.resolve_target = resolve_target
        self._listeners: List[CommitListener] = []
        if on_commit is not None:
            self._listeners.append(on_commit)
        self._reset()

    def _reset(self) -> None:
        self.phase = DragPhase.IDLE
        self.active_id: Optional[str] = None
        self.active_kind: Optional[EntityKind] = None
        self.preview: Optional[DropTarget] = None

    def subscribe(self, listener: CommitListener) -> None:
        """Register a callback invoked after every committed drop."""
        self._listeners.append(listener)

    # =========================================================================
    # Gesture events
    # =========================================================================

    def drag_start(self, active_id: str) -> bool:
        """Begin a gesture. Returns False if the id is not on the board."""
        if self.phase is DragPhase.DRAGGING:
            logger.debug(f"drag_start('{active_id}') while dragging '{self.active_id}', cancelling")
            self.drag_cancel()

        kind = self.board.kind_of(active_id)
        if kind is None:
            logger.warning(f"drag_start for unknown id '{active_id}' ignored")
            return False

        self.phase = DragPhase.DRAGGING
        self.active_id = active_id
        self.active_kind = kind
        return True

    def drag_over(self, over_id: Optional[str]) -> Optional[DropTarget]:
        """Record the preview target. Never mutates the board."""
        if self.phase is not DragPhase.DRAGGING:
            return None
        self.preview = self.resolve_target(over_id, self.board)
        return self.preview

    def drag_end(self, over_id: Optional[str]) -> Optional[DropResult]:
        """
        Finish the gesture.

        Returns:
            The committed DropResult, or None for a no-op, a cancel or an
            invalid target.
        """
        if self.phase is not DragPhase.DRAGGING:
            return None

        active_id = self.active_id
        active_kind = self.active_kind
        self._reset()

        target = self.resolve_target(over_id, self.board)
        if target is None:
            logger.debug(f"Drop of '{active_id}' outside any target, cancelled")
            return None
        if target.id == active_id:
            return None

        try:
            result = self._commit(active_id, active_kind, target)
        except InvalidDragTarget as e:
            logger.debug(f"{e.message}; treated as cancel")
            return None

        if result is not None:
            for listener in self._listeners:
                listener(result, self.board)
        return result

    def drag_cancel(self) -> None:
        """Abandon the gesture without touching the board."""
        self._reset()

    # =========================================================================
    # Drop rules
    # =========================================================================

    def _commit(
        self,
        active_id: str,
        active_kind: EntityKind,
        target: DropTarget,
    ) -> Optional[DropResult]:
        if active_kind is EntityKind.GROUP:
            if target.kind is not EntityKind.GROUP:
                raise InvalidDragTarget(active_id, target.id, "a group can only be dropped on a group")
            new_index = self.board.group_order.index(target.id)
            return self.board.move_group(active_id, new_index)

        current_group = self.board.group_of(active_id)

        if target.kind is EntityKind.GROUP:
            if target.group_id == current_group:
                return None
            return self.board.move_item(active_id, target.group_id)

        return self.board.move_item(active_id, target.group_id, target.index)


def group_order_key(scope_key: str) -> str:
    return f"{scope_key}:groups"


def children_key(scope_key: str, group_id: Optional[str]) -> str:
    return f"{scope_key}:group:{group_id}" if group_id is not None else f"{scope_key}:top"


def persist_commits(order_store: OrderStore, scope_key: str) -> CommitListener:
    """
    Listener that writes committed drops to an order store.

    Group reorders save the group order; item moves save the child list of
    every group the move touched.
    """
    def listener(result: DropResult, board: Board) -> None:
        if result.kind is DropKind.GROUP_REORDER:
            order_store.set_order(group_order_key(scope_key), board.group_order)
            return

        touched = [result.from_group]
        if result.to_group != result.from_group:
            touched.append(result.to_group)
        for group_id in touched:
            order_store.set_order(children_key(scope_key, group_id), board.container(group_id))

    return listener
