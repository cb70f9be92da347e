"""
Item registry.

Merges tagged source collections (events, sprints, workload allocations,
widget library entries...) into one de-duplicated, stably ordered list.

Precedence: when two sources supply the same identifier, the first source in
argument order wins and the later duplicate is ignored.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from app.domain.arrangement.exceptions import MissingIdentifierError
from app.domain.arrangement.models import Item

logger = logging.getLogger(__name__)

RawItem = Union[Item, Mapping[str, Any]]
SourceCollection = Tuple[str, Sequence[RawItem]]


@dataclass
class RegistryDiff:
    """Ids added and removed between two item lists."""
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed


def _coerce(raw: RawItem, source: str, position: int) -> Item:
    """Turn a raw source row into an Item, rejecting rows without an id."""
    if isinstance(raw, Item):
        item = raw
    elif isinstance(raw, Mapping):
        item = Item.from_dict(raw, source=source)
    else:
        raise MissingIdentifierError(source, position, raw)

    if not isinstance(item.id, str) or not item.id:
        raise MissingIdentifierError(source, position, raw)

    if item.source is None:
        item.source = source
    return item


def ingest(source_collections: Iterable[SourceCollection]) -> List[Item]:
    """
    Merge tagged source lists into one de-duplicated list.

    Args:
        source_collections: (source_tag, items) pairs in precedence order

    Returns:
        Items of source 1 in their given order, then items of source 2 not
        already included, and so on.

    Raises:
        MissingIdentifierError: if any item has no identifier
    """
    merged: List[Item] = []
    seen: Dict[str, str] = {}

    for source, items in source_collections:
        for position, raw in enumerate(items):
            item = _coerce(raw, source, position)
            if item.id in seen:
                if seen[item.id] != source:
                    logger.debug(
                        f"Duplicate id '{item.id}' from '{source}' ignored, "
                        f"already supplied by '{seen[item.id]}'"
                    )
                continue
            seen[item.id] = source
            merged.append(item)

    return merged


def diff(previous: Sequence[Item], next: Sequence[Item]) -> RegistryDiff:
    """Ids added (in `next` order) and removed (in `previous` order)."""
    previous_ids = [item.id for item in previous]
    next_ids = [item.id for item in next]
    previous_set = set(previous_ids)
    next_set = set(next_ids)

    return RegistryDiff(
        added=[item_id for item_id in next_ids if item_id not in previous_set],
        removed=[item_id for item_id in previous_ids if item_id not in next_set],
    )


class ItemRegistry:
    """
    Canonical item list across refreshes.

    Items are only removed by a full refresh in which no source supplies
    them any more, never because a single render missed an entry.
    """

    def __init__(self, source_collections: Optional[Iterable[SourceCollection]] = None):
        self._items: List[Item] = []
        self._by_id: Dict[str, Item] = {}
        if source_collections is not None:
            self.refresh(source_collections)

    def refresh(self, source_collections: Iterable[SourceCollection]) -> RegistryDiff:
        """Replace the registry contents with a full refresh and return the diff."""
        items = ingest(source_collections)
        changes = diff(self._items, items)

        self._items = items
        self._by_id = {item.id: item for item in items}

        if not changes.is_empty:
            logger.info(
                f"Registry refreshed: {len(changes.added)} added, "
                f"{len(changes.removed)} removed"
            )
        return changes

    def get(self, item_id: str) -> Optional[Item]:
        return self._by_id.get(item_id)

    def ids(self) -> List[str]:
        """Ids in natural (source) order."""
        return [item.id for item in self._items]

    def items(self) -> List[Item]:
        return list(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._by_id

    def __len__(self) -> int:
        return len(self._items)
