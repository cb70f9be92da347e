"""API-layer exceptions for order and layout records.

Each maps to one HTTP status and a stable error_code; the handlers in
error_handlers.py render them as {"detail": {error_code, message, details}}.
"""

from typing import Any, Dict, List, Optional


class APIError(Exception):
    """Base class for API errors."""
    
    status_code = 500
    
    def __init__(
        self,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details or None,
        }


class RecordNotFoundError(APIError):
    """No stored record for the scope.

    The error code is derived from the record type:
    "order_record" -> ORDER_RECORD_NOT_FOUND.
    """
    
    status_code = 404
    
    def __init__(self, record_type: str, scope_key: str):
        self.scope_key = scope_key
        label = record_type.replace("_", " ").capitalize()
        super().__init__(
            error_code=f"{record_type.upper()}_NOT_FOUND",
            message=f"{label} for scope '{scope_key}' not found",
            details={"scope": scope_key},
        )


class InvalidPayloadError(APIError):
    """Pushed order or layout failed the content checks (empty or duplicate ids)."""
    
    status_code = 400
    
    def __init__(self, message: str, problems: List[Dict[str, Any]]):
        self.problems = problems
        super().__init__(
            error_code="VALIDATION_ERROR",
            message=message,
            details={"problems": problems},
        )


class StaleRevisionError(APIError):
    """Push was based on a revision the server has moved past."""
    
    status_code = 409
    
    def __init__(self, scope_key: str, base_revision: int, current_revision: int):
        super().__init__(
            error_code="REVISION_CONFLICT",
            message=(
                f"Scope '{scope_key}' is at revision {current_revision}, "
                f"push was based on {base_revision}"
            ),
            details={"base_revision": base_revision, "current_revision": current_revision},
        )
