"""Unit-of-work lock scope: the host owns the managers it created and releases them all at teardown."""

import logging
import uuid
from typing import Any

from kvlock.core.context import correlation_id_ctx, scope_id_ctx
from kvlock.locking.lock_manager import LockManager
from kvlock.locking.namespace import LockNamespace
from kvlock.locking.store import LockStore

logger = logging.getLogger(__name__)


class LockScope:
    """
    Request/task-scoped list of LockManager instances. release_all() is the teardown hook:
    it bounds lock lifetime to the unit of work even when that work crashed or unwound.

        async with LockScope() as scope:
            locks = scope.manager(store, namespace)
            if await locks.acquire("job:42"):
                ...

    correlation_id, if given, is bound to the logging context for the scope's lifetime.
    """

    def __init__(self, scope_id: str | None = None, correlation_id: str | None = None) -> None:
        self.scope_id = scope_id or str(uuid.uuid4())
        self.correlation_id = correlation_id
        self._managers: list[LockManager] = []
        self._token = None
        self._correlation_token = None

    @property
    def managers(self) -> list[LockManager]:
        return list(self._managers)

    def track(self, manager: LockManager) -> LockManager:
        if not any(m is manager for m in self._managers):
            self._managers.append(manager)
        return manager

    def manager(self, store: LockStore, namespace: LockNamespace | str = "", **kwargs: Any) -> LockManager:
        """Create a LockManager bound to this scope."""
        return self.track(LockManager(store, namespace, **kwargs))

    async def release_all(self) -> None:
        """Release every lock held by every tracked manager, then forget the managers."""
        managers, self._managers = self._managers, []
        for manager in managers:
            try:
                await manager.release_all()
            except Exception as e:
                logger.error(
                    "lock_scope_release_failed",
                    extra={"namespace": manager.namespace.prefix, "error": str(e)},
                )
        logger.debug("lock_scope_released", extra={"managers": len(managers)})

    async def __aenter__(self) -> "LockScope":
        self._token = scope_id_ctx.set(self.scope_id)
        if self.correlation_id is not None:
            self._correlation_token = correlation_id_ctx.set(self.correlation_id)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await self.release_all()
        finally:
            if self._token is not None:
                scope_id_ctx.reset(self._token)
                self._token = None
            if self._correlation_token is not None:
                correlation_id_ctx.reset(self._correlation_token)
                self._correlation_token = None
