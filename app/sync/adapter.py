"""
Persistence sync adapter.

Pushes order/layout snapshots to the persistence API and pulls them at
initialization. Every call returns a result value instead of raising:
an Ack (or the pulled state) on success, a SyncError on failure. The adapter
never retries and never touches local state; the caller decides whether to
retry, revert or tell the user the change is not confirmed yet.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx

logger = logging.getLogger(__name__)


class SyncErrorKind(str, Enum):
    NETWORK = "network"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    SERVER = "server"


@dataclass(frozen=True)
class Ack:
    """Server confirmation of a push."""
    scope: str
    revision: int
    updated_at: Optional[str] = None


@dataclass(frozen=True)
class SyncError:
    """A failed push or pull. Returned, never raised."""
    kind: SyncErrorKind
    message: str
    status_code: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)


SyncResult = Union[Ack, SyncError]
PullResult = Union[List[str], Dict[str, Any], None, SyncError]


def _error_message(response: httpx.Response) -> str:
    """Pull a human-readable message out of an error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"

    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, dict) and detail.get("message"):
            return detail["message"]
        if isinstance(detail, str):
            return detail
        if body.get("error"):
            return str(body["error"])
    return f"HTTP {response.status_code}"


def _error_from_response(response: httpx.Response) -> SyncError:
    status = response.status_code
    if status in (400, 422):
        kind = SyncErrorKind.VALIDATION
    elif status == 409:
        kind = SyncErrorKind.CONFLICT
    else:
        kind = SyncErrorKind.SERVER
    return SyncError(kind=kind, message=_error_message(response), status_code=status)


class PersistenceSyncAdapter:
    """
    HTTP client for the order and layout endpoints.

    Usage:
        async with PersistenceSyncAdapter("http://localhost:8000/api/v1") as adapter:
            result = await adapter.push("board:42", ["a", "b"])
    """

    RESOURCES = ("order", "layout")

    def __init__(
        self,
        base_url: str,
        resource: str = "order",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if resource not in self.RESOURCES:
            raise ValueError(f"Unknown resource '{resource}', expected one of {self.RESOURCES}")
        self.resource = resource
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "PersistenceSyncAdapter":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _body(self, scope_key: str, payload: Any, base_revision: Optional[int] = None) -> Dict[str, Any]:
        if self.resource == "order":
            body = {"scope": scope_key, "order": list(payload)}
        else:
            body = {"scope": scope_key, "layout": dict(payload)}
        if base_revision is not None:
            body["base_revision"] = base_revision
        return body

    async def push(
        self,
        scope_key: str,
        payload: Union[Sequence[str], Dict[str, Any]],
        base_revision: Optional[int] = None,
    ) -> SyncResult:
        """
        Send the current snapshot for a scope.

        Args:
            scope_key: Scope the snapshot belongs to
            payload: Order (list of ids) or layout (dict)
            base_revision: Revision the caller last saw. When given, the server
                rejects the push with 409 if the record has moved on; when
                omitted the push is last-write-wins.

        Returns:
            Ack on 2xx, SyncError otherwise (network, validation, conflict, server)
        """
        body = self._body(scope_key, payload, base_revision)
        try:
            response = await self._client.post(f"/{self.resource}", json=body)
        except httpx.TransportError as e:
            logger.warning(f"Push of '{scope_key}' failed: {e}")
            return SyncError(kind=SyncErrorKind.NETWORK, message=str(e) or type(e).__name__)

        if response.is_success:
            try:
                data = response.json()
            except ValueError:
                return SyncError(
                    kind=SyncErrorKind.SERVER,
                    message="Push acknowledged with a non-JSON body",
                    status_code=response.status_code,
                )
            if not isinstance(data, dict):
                return SyncError(
                    kind=SyncErrorKind.SERVER,
                    message="Push acknowledged with a body that is not an object",
                    status_code=response.status_code,
                )
            try:
                revision = int(data.get("revision", 0))
            except (TypeError, ValueError):
                return SyncError(
                    kind=SyncErrorKind.SERVER,
                    message=f"Push acknowledged with an invalid revision: {data.get('revision')!r}",
                    status_code=response.status_code,
                )
            return Ack(
                scope=data.get("scope", scope_key),
                revision=revision,
                updated_at=data.get("updated_at"),
            )

        error = _error_from_response(response)
        logger.warning(f"Push of '{scope_key}' rejected ({error.kind.value}): {error.message}")
        return error

    async def pull(self, scope_key: str) -> PullResult:
        """
        Fetch the stored snapshot for a scope.

        Returns:
            The stored order (list) or layout (dict); None when nothing is
            stored yet; SyncError on failure.
        """
        try:
            response = await self._client.get(f"/{self.resource}", params={"scope": scope_key})
        except httpx.TransportError as e:
            logger.warning(f"Pull of '{scope_key}' failed: {e}")
            return SyncError(kind=SyncErrorKind.NETWORK, message=str(e) or type(e).__name__)

        if response.status_code == 404:
            return None
        if not response.is_success:
            error = _error_from_response(response)
            logger.warning(f"Pull of '{scope_key}' rejected ({error.kind.value}): {error.message}")
            return error

        try:
            data = response.json()
        except ValueError:
            return SyncError(
                kind=SyncErrorKind.SERVER,
                message="Pull returned a non-JSON body",
                status_code=response.status_code,
            )

        if not isinstance(data, dict):
            return SyncError(
                kind=SyncErrorKind.SERVER,
                message="Pull returned a body that is not an object",
                status_code=response.status_code,
            )
        return data.get(self.resource)
