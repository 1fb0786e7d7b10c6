"""
Cancellable Call Executor

Runs one unit of network work as an independent asyncio task and races it
against the caller's CallContext. Exactly one CallOutcome is produced per
call: the work's value, the work's failure, or the context's own error,
whichever comes first, dood!

If the context wins, the work task is abandoned: it keeps running in
background (unless ``abortOnCancel`` is set) and its late result is drained
and logged, never delivered.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Callable, Coroutine, Generic, Optional, Self, Set, TypeVar

from .context import CallContext
from .exceptions import CallTimeoutError, CancellationError, NominatimError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OutcomeKind(StrEnum):
    """Kind of a call outcome"""

    SUCCESS = "success"
    TRANSPORT_FAILURE = "transport_failure"
    """The unit of work failed (network, decoding or service error)"""
    CANCELLATION_FAILURE = "cancellation_failure"
    """The caller's context fired first"""


@dataclass(frozen=True, slots=True)
class CallOutcome(Generic[T]):
    """Single terminal outcome of an executed call."""

    kind: OutcomeKind
    value: Optional[T] = None
    error: Optional[NominatimError] = None

    @classmethod
    def success(cls, value: T) -> Self:
        return cls(kind=OutcomeKind.SUCCESS, value=value)

    @classmethod
    def failure(cls, error: NominatimError) -> Self:
        return cls(kind=OutcomeKind.TRANSPORT_FAILURE, error=error)

    @classmethod
    def cancelled(cls, error: CancellationError) -> Self:
        return cls(kind=OutcomeKind.CANCELLATION_FAILURE, error=error)

    @property
    def ok(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    def unwrap(self) -> T:
        """Return the value of a successful outcome or raise the carried error.

        Raises:
            NominatimError: The error of a failed or cancelled outcome
        """
        if self.error is not None:
            raise self.error
        # Success outcomes always carry a value, even if it is falsy
        return self.value  # type: ignore[return-value]


class CallExecutor:
    """Races units of work against caller contexts, dood!

    One executor may serve any number of concurrent calls: every call gets its
    own task and shares nothing with other calls, except the set of abandoned
    tasks kept alive until they finish.

    Attributes:
        abortOnCancel: Cancel the work task (and thus the HTTP request) when
            the context wins the race. Otherwise the task runs to completion
            in background and its outcome is discarded.
    """

    __slots__ = ("abortOnCancel", "_abandoned")

    def __init__(self, abortOnCancel: bool = False) -> None:
        self.abortOnCancel = abortOnCancel
        # Strong references: the event loop only keeps weak ones to tasks
        self._abandoned: Set[asyncio.Task] = set()

    @property
    def abandonedTasks(self) -> Set[asyncio.Task]:
        """Work tasks still running after their caller stopped waiting."""
        return set(self._abandoned)

    async def execute(
        self,
        ctx: CallContext,
        work: Callable[[], Coroutine[Any, Any, T]],
        name: str = "nominatim-call",
    ) -> CallOutcome[T]:
        """Run work() as a task and wait for it or for the context, whichever is first.

        Args:
            ctx: Caller's cancellation context
            work: Zero-argument coroutine function performing the round trip
            name: Task name, used in logs

        Returns:
            Exactly one CallOutcome
        """
        workTask = asyncio.create_task(work(), name=name)
        cancelFuture: asyncio.Future[CancellationError] = asyncio.get_running_loop().create_future()

        def onCancel(error: CancellationError) -> None:
            if not cancelFuture.done():
                cancelFuture.set_result(error)

        ctx.addCancelCallback(onCancel)
        try:
            done, _ = await asyncio.wait(
                {workTask, cancelFuture},
                timeout=ctx.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            # Our own caller was cancelled: nobody is waiting for the work anymore
            workTask.cancel()
            raise
        finally:
            ctx.removeCancelCallback(onCancel)

        if workTask in done and cancelFuture not in done:
            return self._outcomeOf(workTask, name)

        # Context fired first (or together with the work): cancellation wins.
        # Nothing done at all means the deadline passed.
        error = cancelFuture.result() if cancelFuture.done() else (ctx.error() or CallTimeoutError())
        logger.debug(f"{name}: context done before work completed: {type(error).__name__}#{error}")
        self._abandon(workTask, name)
        return CallOutcome.cancelled(error)

    def _outcomeOf(self, workTask: "asyncio.Task[T]", name: str) -> CallOutcome[T]:
        if workTask.cancelled():
            # Cancelled by someone else, caller's context is still active
            return CallOutcome.cancelled(CancellationError(f"{name}: work task was cancelled"))

        exc = workTask.exception()
        if exc is None:
            return CallOutcome.success(workTask.result())
        if isinstance(exc, NominatimError):
            return CallOutcome.failure(exc)

        logger.warning(f"{name}: unexpected error: {type(exc).__name__}#{exc}")
        error = TransportError(f"Unexpected error: {type(exc).__name__}#{exc}")
        error.__cause__ = exc
        return CallOutcome.failure(error)

    def _abandon(self, workTask: "asyncio.Task[T]", name: str) -> None:
        if workTask.done():
            self._drain(workTask, name)
            return

        if self.abortOnCancel:
            workTask.cancel()

        self._abandoned.add(workTask)
        workTask.add_done_callback(lambda task: self._drain(task, name))

    def _drain(self, workTask: "asyncio.Task[T]", name: str) -> None:
        """Consume the outcome of an abandoned task so it never goes unretrieved."""
        self._abandoned.discard(workTask)
        if workTask.cancelled():
            logger.debug(f"{name}: abandoned work aborted")
            return
        exc = workTask.exception()
        if exc is not None:
            logger.debug(f"{name}: abandoned work failed late: {type(exc).__name__}#{exc}")
        else:
            logger.debug(f"{name}: abandoned work completed late, result discarded")

    async def shutdown(self, cancel: bool = True) -> None:
        """Wait for (or cancel, then wait for) all abandoned tasks.

        Args:
            cancel: Cancel abandoned tasks instead of letting them finish
        """
        pending = list(self._abandoned)
        if not pending:
            return
        logger.debug(f"Shutting down executor with {len(pending)} abandoned tasks, dood!")
        if cancel:
            for task in pending:
                task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
