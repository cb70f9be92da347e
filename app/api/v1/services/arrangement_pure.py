"""Pure checks for order and layout pushes.

No I/O, no DB, no logging; the routers turn problems into 400 responses.
"""

from typing import Dict, List, Sequence

from app.api.v1.schemas.arrangement import LayoutState


def order_problems(order: Sequence[str]) -> List[Dict[str, object]]:
    """Empty ids and duplicates in a pushed order, one entry per problem."""
    problems: List[Dict[str, object]] = []
    seen: Dict[str, int] = {}

    for position, item_id in enumerate(order):
        if not item_id.strip():
            problems.append({"index": position, "problem": "empty id"})
            continue
        if item_id in seen:
            problems.append({
                "index": position,
                "problem": f"duplicate of index {seen[item_id]}",
                "id": item_id,
            })
            continue
        seen[item_id] = position

    return problems


def layout_problems(layout: LayoutState) -> List[Dict[str, object]]:
    """Duplicate widget ids and widgets that are both listed and removed."""
    problems = order_problems([widget.id for widget in layout.widgets])

    listed = {widget.id for widget in layout.widgets}
    for widget_id in layout.removed:
        if widget_id in listed:
            problems.append({"id": widget_id, "problem": "listed and removed"})

    return problems
