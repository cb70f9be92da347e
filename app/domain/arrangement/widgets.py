"""
Dashboard widget layout.

Order, visibility and membership of dashboard widgets over a fixed widget
library. Layout state is stored as:

    {
        "widgets": [{"id": "budget", "enabled": true, "order": 0}, ...],
        "hidden": ["plans"],
        "removed": ["recent-notes"]
    }

Any of the keys may be missing. Widgets the library no longer offers are
dropped; widgets added to the library since the layout was saved are
appended, enabled, unless the user removed them.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from app.domain.arrangement.exceptions import MalformedOrderRecord, UnknownItemReference
from app.domain.arrangement.order_store import apply_move, reconcile

logger = logging.getLogger(__name__)


@dataclass
class WidgetEntry:
    id: str
    enabled: bool = True


def _stored_entries(state: Mapping[str, Any]) -> List[WidgetEntry]:
    """Widget entries from stored state, sorted by their saved order."""
    raw = state.get("widgets") or []
    if not isinstance(raw, list):
        raise MalformedOrderRecord(f"'widgets' must be a list, got {type(raw).__name__}")

    indexed = []
    for position, entry in enumerate(raw):
        if not isinstance(entry, Mapping) or not isinstance(entry.get("id"), str):
            raise MalformedOrderRecord(f"widget entry {position} has no string id")
        order = entry.get("order", position)
        if not isinstance(order, int):
            order = position
        indexed.append((order, position, WidgetEntry(id=entry["id"], enabled=bool(entry.get("enabled", True)))))

    indexed.sort(key=lambda t: (t[0], t[1]))
    return [entry for _, _, entry in indexed]


def _id_list(state: Mapping[str, Any], key: str) -> List[str]:
    raw = state.get(key) or []
    if not isinstance(raw, list) or not all(isinstance(v, str) for v in raw):
        raise MalformedOrderRecord(f"'{key}' must be a list of strings")
    return raw


class WidgetLayout:
    """User arrangement of the widget library."""

    def __init__(
        self,
        library: Sequence[str],
        entries: Optional[Sequence[WidgetEntry]] = None,
        removed: Optional[Sequence[str]] = None,
    ):
        self.library = list(library)
        self.removed = [w for w in (removed or []) if w in self.library]

        enabled = {entry.id: entry.enabled for entry in (entries or [])}
        live = [w for w in self.library if w not in self.removed]
        order = reconcile([entry.id for entry in (entries or [])], live)
        self._entries: List[WidgetEntry] = [
            WidgetEntry(id=widget_id, enabled=enabled.get(widget_id, True))
            for widget_id in order
        ]

    @classmethod
    def from_state(cls, library: Sequence[str], state: Optional[Mapping[str, Any]]) -> "WidgetLayout":
        """
        Rebuild a layout from stored state.

        Malformed state is logged and replaced by the library's natural
        order with every widget enabled.
        """
        if not state:
            return cls(library)
        if not isinstance(state, Mapping):
            logger.warning(f"Widget layout state is {type(state).__name__}, using defaults")
            return cls(library)

        try:
            entries = _stored_entries(state)
            hidden = set(_id_list(state, "hidden"))
            removed = _id_list(state, "removed")
        except MalformedOrderRecord as e:
            logger.warning(f"{e.message}; using default widget layout")
            return cls(library)

        unknown = [entry.id for entry in entries if entry.id not in library]
        if unknown:
            logger.info(f"Dropping widgets no longer in the library: {unknown}")

        for entry in entries:
            if entry.id in hidden:
                entry.enabled = False
        known = {entry.id for entry in entries}
        entries.extend(WidgetEntry(id=w, enabled=False) for w in hidden if w not in known and w in library)

        return cls(library, entries, removed)

    # =========================================================================
    # Queries
    # =========================================================================

    def order(self) -> List[str]:
        return [entry.id for entry in self._entries]

    def visible_ids(self) -> List[str]:
        return [entry.id for entry in self._entries if entry.enabled]

    def hidden_ids(self) -> List[str]:
        return [entry.id for entry in self._entries if not entry.enabled]

    def available_to_add(self) -> List[str]:
        """Library widgets not currently on the dashboard."""
        return list(self.removed)

    def _entry(self, widget_id: str) -> WidgetEntry:
        for entry in self._entries:
            if entry.id == widget_id:
                return entry
        raise UnknownItemReference([widget_id], context="widget layout")

    # =========================================================================
    # Mutations
    # =========================================================================

    def toggle(self, widget_id: str) -> bool:
        """Flip visibility. Returns the new enabled flag."""
        entry = self._entry(widget_id)
        entry.enabled = not entry.enabled
        return entry.enabled

    def add(self, widget_id: str) -> None:
        """Put a removed library widget back, enabled, at the end."""
        if widget_id not in self.library:
            raise UnknownItemReference([widget_id], context="widget library")
        if widget_id not in self.removed:
            return
        self.removed.remove(widget_id)
        self._entries.append(WidgetEntry(id=widget_id, enabled=True))

    def remove(self, widget_id: str) -> None:
        entry = self._entry(widget_id)
        self._entries.remove(entry)
        self.removed.append(widget_id)

    def move(self, widget_id: str, new_index: int) -> List[str]:
        by_id = {entry.id: entry for entry in self._entries}
        order = apply_move(self.order(), widget_id, new_index)
        self._entries = [by_id[w] for w in order]
        return order

    def to_state(self) -> Dict[str, Any]:
        return {
            "widgets": [
                {"id": entry.id, "enabled": entry.enabled, "order": index}
                for index, entry in enumerate(self._entries)
            ],
            "hidden": self.hidden_ids(),
            "removed": list(self.removed),
        }
