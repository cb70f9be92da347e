"""
Sync coordination.

Local mutations are applied immediately; syncing is a downstream side
effect. The coordinator coalesces rapid successive snapshots per scope into
one push after a debounce delay and keeps at most one push in flight per
scope. A snapshot scheduled while a push is in flight is pushed after it,
so the latest local state is always the last one written.

Push results are reported, never applied back to local state.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from app.core.logging import LogContext
from app.sync.adapter import Ack, PersistenceSyncAdapter, SyncError, SyncResult

logger = logging.getLogger(__name__)

ResultListener = Callable[[str, SyncResult, Any], None]


class SyncCoordinator:
    """Debounced, last-write-wins pusher on top of a PersistenceSyncAdapter."""

    def __init__(
        self,
        adapter: PersistenceSyncAdapter,
        debounce_seconds: float = 0.3,
        on_result: Optional[ResultListener] = None,
    ):
        self.adapter = adapter
        self.debounce_seconds = debounce_seconds
        self.on_result = on_result
        self._pending: Dict[str, Any] = {}
        self._workers: Dict[str, asyncio.Task] = {}
        self._results: Dict[str, SyncResult] = {}

    def schedule(self, scope_key: str, payload: Any) -> None:
        """
        Queue a snapshot for a scope. Replaces any snapshot not yet pushed.

        Must be called from inside the running event loop. Signature matches
        OrderStore's save callable.
        """
        self._pending[scope_key] = payload
        if scope_key not in self._workers:
            loop = asyncio.get_running_loop()
            self._workers[scope_key] = loop.create_task(self._run(scope_key))

    @property
    def unconfirmed(self) -> bool:
        """True while any snapshot is waiting or in flight."""
        return bool(self._pending) or bool(self._workers)

    def last_result(self, scope_key: str) -> Optional[SyncResult]:
        return self._results.get(scope_key)

    async def _run(self, scope_key: str) -> None:
        try:
            while True:
                await asyncio.sleep(self.debounce_seconds)
                payload = self._pending.pop(scope_key)
                result = await self.adapter.push(scope_key, payload)
                self._results[scope_key] = result

                with LogContext(scope=scope_key):
                    if isinstance(result, SyncError):
                        logger.warning(f"Sync not confirmed ({result.kind.value}): {result.message}")
                    elif isinstance(result, Ack):
                        logger.debug(f"Sync confirmed at revision {result.revision}")

                if self.on_result is not None:
                    self.on_result(scope_key, result, payload)

                if scope_key not in self._pending:
                    break
        finally:
            self._workers.pop(scope_key, None)

    async def flush(self) -> Dict[str, SyncResult]:
        """Wait until every scheduled snapshot has been pushed; return last results."""
        while self._workers:
            await asyncio.gather(*list(self._workers.values()))
        return dict(self._results)
