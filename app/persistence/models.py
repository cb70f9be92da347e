"""Persistence domain models."""

from dataclasses import dataclass, field
from datetime import datetime, UTC
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class RecordKind(str, Enum):
    """What a stored record holds."""
    ORDER = "order"
    LAYOUT = "layout"


@dataclass
class StoredOrderRecord:
    """
    Domain model for a persisted arrangement.

    ORDER records hold a list of ids; LAYOUT records hold widget layout
    state ({"widgets": [...], "hidden": [...], "removed": [...]}). The
    revision starts at 1 and increases on every save.
    """
    kind: RecordKind
    scope_key: str
    content: Union[List[str], Dict[str, Any]]
    revision: int = 1
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    record_id: Optional[int] = None

    @property
    def order(self) -> List[str]:
        """Ids of an ORDER record (empty for layouts)."""
        if self.kind is RecordKind.ORDER:
            return list(self.content)
        return []
