"""Ordered collection arrangement: registry, order store, drag engine, grouping."""

from app.domain.arrangement.board import Board, ColumnView
from app.domain.arrangement.drag import (
    DragController,
    DragPhase,
    DropTarget,
    children_key,
    direct_target,
    group_order_key,
    persist_commits,
)
from app.domain.arrangement.exceptions import (
    ArrangementError,
    InvalidDragTarget,
    MalformedOrderRecord,
    MissingIdentifierError,
    UnknownItemReference,
)
from app.domain.arrangement.grouping import (
    aggregate,
    bucket_by_day,
    build_buckets,
    format_money,
    group_by,
    in_date_range,
    month_grid,
    period_start,
    share_percent,
    sort_buckets,
    to_date,
    to_minor_units,
)
from app.domain.arrangement.models import (
    NO_DATA,
    AggregateOp,
    Bucket,
    DropKind,
    DropResult,
    EntityKind,
    Group,
    Item,
)
from app.domain.arrangement.order_store import (
    OrderStore,
    apply_move,
    reconcile,
    validate_order_record,
)
from app.domain.arrangement.registry import ItemRegistry, RegistryDiff, diff, ingest
from app.domain.arrangement.widgets import WidgetEntry, WidgetLayout

__all__ = [
    # Models
    "Item",
    "Group",
    "Bucket",
    "DropResult",
    "DropKind",
    "EntityKind",
    "AggregateOp",
    "NO_DATA",
    # Registry
    "ItemRegistry",
    "RegistryDiff",
    "ingest",
    "diff",
    # Order store
    "OrderStore",
    "reconcile",
    "apply_move",
    "validate_order_record",
    # Board and drag
    "Board",
    "ColumnView",
    "DragController",
    "DragPhase",
    "DropTarget",
    "direct_target",
    "persist_commits",
    "group_order_key",
    "children_key",
    # Grouping
    "group_by",
    "aggregate",
    "build_buckets",
    "sort_buckets",
    "share_percent",
    "in_date_range",
    "bucket_by_day",
    "month_grid",
    "period_start",
    "to_date",
    "to_minor_units",
    "format_money",
    # Widgets
    "WidgetLayout",
    "WidgetEntry",
    # Exceptions
    "ArrangementError",
    "MissingIdentifierError",
    "MalformedOrderRecord",
    "UnknownItemReference",
    "InvalidDragTarget",
]
