"""
Arrangement exceptions.

Data-shape errors (missing identifiers, malformed stored orders, dangling
references) are raised by the pure functions and recovered by the stateful
callers. Sync failures are not exceptions; see app.sync.
"""

from typing import Any, List, Optional


class ArrangementError(Exception):
    """Base exception for all arrangement errors."""
    
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MissingIdentifierError(ArrangementError):
    """
    Raised when a source collection supplies an item without an identifier.
    
    Items are never dropped silently: the source tag and position are
    reported so the data can be fixed upstream.
    """
    
    def __init__(self, source: Optional[str], position: int, raw: Any = None):
        self.source = source
        self.position = position
        self.raw = raw
        super().__init__(
            f"Item at position {position} of source '{source}' has no identifier"
        )


class MalformedOrderRecord(ArrangementError):
    """Stored order is not a list of non-empty strings."""
    
    def __init__(self, reason: str, scope_key: Optional[str] = None):
        self.reason = reason
        self.scope_key = scope_key
        message = f"Malformed order record: {reason}"
        if scope_key:
            message = f"Malformed order record for '{scope_key}': {reason}"
        super().__init__(message)


class UnknownItemReference(ArrangementError):
    """An order or group references ids that are not in the registry."""
    
    def __init__(self, ids: List[str], context: str = "order"):
        self.ids = list(ids)
        self.context = context
        super().__init__(f"Unknown ids in {context}: {', '.join(self.ids)}")


class InvalidDragTarget(ArrangementError):
    """
    Raised when a drop target cannot accept the dragged entity.
    
    The drag controller converts this into a cancellation.
    """
    
    def __init__(self, active_id: str, over_id: Optional[str], reason: str):
        self.active_id = active_id
        self.over_id = over_id
        self.reason = reason
        super().__init__(f"Cannot drop '{active_id}' on '{over_id}': {reason}")
