"""Arrangement domain models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, List, Mapping, Optional


class _NoData:
    """
    Marker for an aggregate that has no defined value.

    Min/Max over an empty bucket return this instead of 0 so callers can
    tell "no data" from "zero".
    """

    _instance: Optional["_NoData"] = None

    def __new__(cls) -> "_NoData":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_DATA"


NO_DATA = _NoData()


class AggregateOp(str, Enum):
    """Aggregate operations over a bucket."""
    SUM = "sum"
    COUNT = "count"
    MIN = "min"
    MAX = "max"


class EntityKind(str, Enum):
    """Reorder domains. A single gesture never mixes the two."""
    ITEM = "item"
    GROUP = "group"


class DropKind(str, Enum):
    """What a committed drop did."""
    GROUP_REORDER = "group_reorder"
    ITEM_REORDER = "item_reorder"
    ITEM_TRANSFER = "item_transfer"


@dataclass
class Item:
    """
    A single orderable/groupable entity (widget, card, calendar entry).

    The identifier comes from the data source. The payload is opaque to the
    arrangement code; start/end are only used for calendar placement.
    """
    id: str
    parent_id: Optional[str] = None
    payload: Any = None
    enabled: bool = True
    source: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: Optional[str] = None) -> "Item":
        """Build an item from a source row. The whole row becomes the payload."""
        return cls(
            id=data.get("id"),
            parent_id=data.get("parent_id"),
            payload=dict(data),
            enabled=data.get("enabled", True),
            source=source,
            start=data.get("start"),
            end=data.get("end"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "parent_id": self.parent_id,
            "enabled": self.enabled,
            "source": self.source,
            "start": self.start,
            "end": self.end,
        }


@dataclass
class Group:
    """A container of items with its own identity (kanban column, widget section)."""
    id: str
    name: str = ""
    children: List[str] = field(default_factory=list)
    capacity: Optional[int] = None
    collapsed: bool = False

    @property
    def is_over_capacity(self) -> bool:
        """True when a WIP limit is set and exceeded. Advisory only."""
        return self.capacity is not None and len(self.children) > self.capacity


@dataclass
class DropResult:
    """Outcome of a committed drop, handed to commit observers."""
    kind: DropKind
    active_id: str
    from_group: Optional[str] = None
    to_group: Optional[str] = None
    from_index: int = 0
    to_index: int = 0
    over_capacity: bool = False


@dataclass
class Bucket:
    """Derived grouping of items with an aggregate value. Never persisted."""
    key: Hashable
    items: List[Item] = field(default_factory=list)
    value: Any = NO_DATA

    @property
    def has_data(self) -> bool:
        return self.value is not NO_DATA
