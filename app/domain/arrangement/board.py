"""
Board: groups of ordered items plus an ordered list of groups.

A group's child list is both the order within the group and, for the ids
it names, the membership: a saved list that holds an item claims it even
when the item's parent_id still points elsewhere, so a move between
groups survives a rebuild. Items no list claims fall back to their
parent_id. Every mutation computes the new lists first and assigns them
together, so an item is never observable in zero or two groups.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from app.domain.arrangement.exceptions import UnknownItemReference
from app.domain.arrangement.models import DropKind, DropResult, EntityKind, Group, Item
from app.domain.arrangement.order_store import apply_move, dangling_ids, reconcile

logger = logging.getLogger(__name__)


@dataclass
class ColumnView:
    """Render view of one group."""
    group: Group
    items: List[Item]

    @property
    def collapsed(self) -> bool:
        return self.group.collapsed

    @property
    def over_capacity(self) -> bool:
        return self.group.is_over_capacity


class Board:
    """Groups, their ordered children, and top-level items."""

    def __init__(
        self,
        groups: Sequence[Group],
        items: Sequence[Item],
        group_order: Optional[Sequence[str]] = None,
        top_level: Optional[Sequence[str]] = None,
    ):
        self.groups: Dict[str, Group] = {group.id: group for group in groups}
        self.items: Dict[str, Item] = {item.id: item for item in items}
        self.group_order: List[str] = reconcile(group_order or [], [g.id for g in groups])
        self.top_level: List[str] = []
        self._claim_saved_members(top_level or [])

        members: Dict[str, List[str]] = {group_id: [] for group_id in self.groups}
        for item in items:
            if item.parent_id is not None and item.parent_id not in self.groups:
                logger.warning(
                    f"Item '{item.id}' references unknown group '{item.parent_id}', "
                    f"treating it as top-level"
                )
                item.parent_id = None
            if item.parent_id is None:
                self.top_level.append(item.id)
            else:
                members[item.parent_id].append(item.id)

        self.top_level = reconcile(top_level or [], self.top_level)
        for group in self.groups.values():
            dropped = dangling_ids(group.children, members[group.id])
            if dropped:
                logger.debug(f"Group '{group.id}' child list had stale ids: {dropped}")
            group.children = reconcile(group.children, members[group.id])

    def _claim_saved_members(self, top_level: Sequence[str]) -> None:
        """Move items to the group whose saved child list holds them.

        Lists are walked in group order, then the top-level list; the first
        list naming an item wins.
        """
        claimed = set()
        containers = [(gid, self.groups[gid].children) for gid in self.group_order]
        containers.append((None, top_level))
        for group_id, saved in containers:
            for item_id in saved:
                item = self.items.get(item_id)
                if item is None or item_id in claimed:
                    continue
                claimed.add(item_id)
                if item.parent_id != group_id:
                    logger.debug(f"Item '{item_id}' moved from '{item.parent_id}' to '{group_id}' by saved order")
                    item.parent_id = group_id

    # =========================================================================
    # Lookups
    # =========================================================================

    def kind_of(self, entity_id: str) -> Optional[EntityKind]:
        if entity_id in self.groups:
            return EntityKind.GROUP
        if entity_id in self.items:
            return EntityKind.ITEM
        return None

    def group_of(self, item_id: str) -> Optional[str]:
        item = self.items.get(item_id)
        if item is None:
            raise UnknownItemReference([item_id], context="board")
        return item.parent_id

    def container(self, group_id: Optional[str]) -> List[str]:
        """Child list of a group, or the top-level list for None."""
        if group_id is None:
            return self.top_level
        return self.groups[group_id].children

    # =========================================================================
    # Mutations
    # =========================================================================

    def move_group(self, group_id: str, new_index: int) -> DropResult:
        """Reorder a group among the groups."""
        if group_id not in self.groups:
            raise UnknownItemReference([group_id], context="groups")
        from_index = self.group_order.index(group_id)
        self.group_order = apply_move(self.group_order, group_id, new_index)
        return DropResult(
            kind=DropKind.GROUP_REORDER,
            active_id=group_id,
            from_index=from_index,
            to_index=self.group_order.index(group_id),
        )

    def move_item(
        self,
        item_id: str,
        target_group_id: Optional[str],
        index: Optional[int] = None,
    ) -> DropResult:
        """
        Move an item within its group or into another group.

        Args:
            item_id: item to move
            target_group_id: destination group, None for top-level
            index: position in the destination list; None appends at the end

        Returns:
            DropResult describing the move
        """
        if target_group_id is not None and target_group_id not in self.groups:
            raise UnknownItemReference([target_group_id], context="groups")

        source_group_id = self.group_of(item_id)
        source = self.container(source_group_id)
        from_index = source.index(item_id)

        if source_group_id == target_group_id:
            target_index = len(source) - 1 if index is None else index
            updated = apply_move(source, item_id, target_index)
            self._assign(source_group_id, updated)
            return DropResult(
                kind=DropKind.ITEM_REORDER,
                active_id=item_id,
                from_group=source_group_id,
                to_group=target_group_id,
                from_index=from_index,
                to_index=updated.index(item_id),
            )

        new_source = [child for child in source if child != item_id]
        new_target = list(self.container(target_group_id))
        insert_at = len(new_target) if index is None else max(0, min(index, len(new_target)))
        new_target.insert(insert_at, item_id)

        self._assign(source_group_id, new_source)
        self._assign(target_group_id, new_target)
        self.items[item_id].parent_id = target_group_id

        over_capacity = False
        if target_group_id is not None:
            target = self.groups[target_group_id]
            over_capacity = target.is_over_capacity
            if over_capacity:
                logger.warning(
                    f"Group '{target.id}' is over its limit of {target.capacity} "
                    f"({len(target.children)} items)"
                )

        return DropResult(
            kind=DropKind.ITEM_TRANSFER,
            active_id=item_id,
            from_group=source_group_id,
            to_group=target_group_id,
            from_index=from_index,
            to_index=insert_at,
            over_capacity=over_capacity,
        )

    def toggle_collapsed(self, group_id: str) -> bool:
        group = self.groups[group_id]
        group.collapsed = not group.collapsed
        return group.collapsed

    def _assign(self, group_id: Optional[str], children: List[str]) -> None:
        if group_id is None:
            self.top_level = children
        else:
            self.groups[group_id].children = children

    # =========================================================================
    # Views
    # =========================================================================

    def columns(self) -> List[ColumnView]:
        """Groups in order, each with its ordered items."""
        return [
            ColumnView(
                group=self.groups[group_id],
                items=[self.items[child] for child in self.groups[group_id].children],
            )
            for group_id in self.group_order
        ]

    def snapshot(self) -> Dict[str, object]:
        """Plain copy of the arrangement (group order, child lists, top-level)."""
        return {
            "group_order": list(self.group_order),
            "groups": {gid: list(g.children) for gid, g in self.groups.items()},
            "top_level": list(self.top_level),
            "parents": {iid: item.parent_id for iid, item in self.items.items()},
        }

    def validate(self) -> List[str]:
        """Membership problems; an empty list means the board is consistent."""
        problems: List[str] = []
        seen: Dict[str, str] = {}

        containers = [(None, self.top_level)] + [
            (gid, group.children) for gid, group in self.groups.items()
        ]
        for group_id, children in containers:
            for child in children:
                label = group_id or "<top-level>"
                if child in seen:
                    problems.append(f"'{child}' appears in '{seen[child]}' and '{label}'")
                seen[child] = label
                item = self.items.get(child)
                if item is None:
                    problems.append(f"'{label}' references unknown item '{child}'")
                elif item.parent_id != group_id:
                    problems.append(f"'{child}' is listed in '{label}' but parent is '{item.parent_id}'")

        for item_id in self.items:
            if item_id not in seen:
                problems.append(f"'{item_id}' is in no group")
        return problems
