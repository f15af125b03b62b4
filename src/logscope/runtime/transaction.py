"""Transactional wrapper: journal compensations, undo them if the body fails.

Example:
    >>> tx = Transactional(ambient)
    >>> def transfer() -> None:
    ...     debit(a, 10); tx.record(lambda: credit(a, 10))
    ...     credit(b, 10); tx.record(lambda: debit(b, 10))
    >>> tx.run(transfer)  # logs "commit" under domain "transaction"
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING, Callable, TypeVar

from .layers import StateLayer

if TYPE_CHECKING:
    from ..core.capability import LogCapable

T = TypeVar("T")
Compensation = Callable[[], object]
Journal = tuple[Compensation, ...]

logger = logging.getLogger("logscope.transaction")


class Transactional(StateLayer[Journal]):
    """Layer whose state is a journal of compensating actions.

    `run` executes a body inside `local_domain(name)`. On success the journal
    is cleared and the commit is logged; on any failure (cancellation
    included) compensations run newest first, then the rollback is logged and
    the original error is re-raised. A compensation that fails is reported on
    the stdlib logger and does not stop the others.

    A `run` inside another `run` of the same layer joins the enclosing
    transaction: on success its compensations move into the outer journal and
    nothing is committed until the outermost body returns. If it fails, only
    its own compensations run and the outer journal is left intact.
    """

    __slots__ = ("name", "_depth")

    def __init__(self, inner: LogCapable, name: str = "transaction") -> None:
        super().__init__(inner, ())
        self.name = name
        self._depth = 0

    def record(self, undo: Compensation) -> None:
        """Register the compensation for a step that just succeeded."""
        self.modify(lambda journal: (*journal, undo))

    def run(self, fn: Callable[[], T]) -> T:
        outer = self._begin()
        try:
            result = self.local_domain(self.name, fn)
        except BaseException as exc:
            self._rollback(outer, exc)
            raise
        self._commit(outer)
        return result

    async def arun(self, fn: Callable[[], Awaitable[T]]) -> T:
        outer = self._begin()
        try:
            result = await self.alocal_domain(self.name, fn)
        except BaseException as exc:
            self._rollback(outer, exc)
            raise
        self._commit(outer)
        return result

    def _begin(self) -> Journal:
        outer, self.state = self.state, ()
        self._depth += 1
        return outer

    def _commit(self, outer: Journal) -> None:
        self._depth -= 1
        if self._depth:
            self.state = (*outer, *self.state)
            return
        journal, self.state = self.state, ()
        self.local_domain(self.name, lambda: self.log_info("commit", {"operations": len(journal)}))

    def _rollback(self, outer: Journal, exc: BaseException) -> None:
        self._depth -= 1
        journal, self.state = self.state, outer if self._depth else ()
        for undo in reversed(journal):
            try:
                undo()
            except Exception:
                logger.exception("[%s] compensation %r failed", self.name, undo)
        # A failing sink raises from here, chained to `exc`.
        self.local_domain(self.name, lambda: self.log_attention(
            "rollback", {"operations": len(journal), "error": repr(exc)}))
