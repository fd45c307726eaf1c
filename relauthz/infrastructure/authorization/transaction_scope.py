"""Transaction scope for relationship writes.

A host operation (usually a database transaction) that writes relationships
collects the compensating reverts in a TransactionScope. If the host
operation fails, every revert runs together; if it succeeds, none run.

Usage:
    async with authz.transaction() as scope:
        await authz.write_relationships(ctx, rels, scope=scope)
        await repository.save(workspace)  # raising here reverts rels

    # Or drive the lifecycle explicitly
    scope = authz.transaction()
    try:
        await authz.write_relationships(ctx, rels, scope=scope)
        await session.commit()
    except SQLAlchemyError:
        await scope.abort()
        raise
    scope.commit()
"""

from __future__ import annotations

import threading
from enum import Enum
from types import TracebackType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from relauthz.domain.protocols.authorization_protocol import RevertAction
    from relauthz.domain.protocols.logger_protocol import LoggerProtocol


async def noop_revert() -> None:
    """Revert handed back when the real revert belongs to a scope."""
    return None


class ScopeState(str, Enum):
    OPEN = "open"
    COMMITTED = "committed"
    ABORTED = "aborted"


class TransactionScope:
    """Accumulates RevertActions for one host operation.

    Writers may register concurrently; the revert list has its own lock,
    separate from the consistency tracker.
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger
        self._lock = threading.Lock()
        self._reverts: list[RevertAction] = []
        self._state = ScopeState.OPEN

    @property
    def state(self) -> ScopeState:
        return self._state

    def __len__(self) -> int:
        with self._lock:
            return len(self._reverts)

    def add_revert(self, revert: RevertAction) -> None:
        """Register a revert to run if the scope aborts.

        Raises:
            RuntimeError: If the scope is already committed or aborted.
        """
        with self._lock:
            self.ensure_open()
            self._reverts.append(revert)

    def commit(self) -> None:
        """Discard every registered revert."""
        with self._lock:
            self.ensure_open()
            discarded = len(self._reverts)
            self._reverts.clear()
            self._state = ScopeState.COMMITTED
        self._logger.debug("transaction_scope_committed", discarded_reverts=discarded)

    async def abort(self) -> None:
        """Run every registered revert.

        Reverts log their own failures and never raise, so one failing
        revert does not stop the others.
        """
        with self._lock:
            self.ensure_open()
            reverts = list(self._reverts)
            self._reverts.clear()
            self._state = ScopeState.ABORTED

        self._logger.info("transaction_scope_aborted", reverts=len(reverts))
        for revert in reverts:
            await revert()

    def ensure_open(self) -> None:
        """Raise RuntimeError unless the scope still accepts reverts."""
        if self._state is not ScopeState.OPEN:
            raise RuntimeError(f"Transaction scope already {self._state.value}")

    async def __aenter__(self) -> TransactionScope:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._state is not ScopeState.OPEN:
            return
        if exc_type is None:
            self.commit()
        else:
            await self.abort()
