"""
Call Context

CallContext carries a caller's cancellation signal and an optional deadline
into a client call. Contexts form a tree: cancelling a parent cancels all of
its children, and a child never outlives its parent's deadline, dood!

Example:
    >>> ctx = CallContext.withTimeout(5.0)
    >>> results = await client.search(ctx, query)

    >>> ctx = CallContext.background().withCancel()
    >>> task = asyncio.create_task(client.checkStatus(ctx))
    >>> ctx.cancel()  # checkStatus() raises CallCancelledError
"""

import asyncio
import logging
import time
import weakref
from typing import Callable, List, Optional, Self

from .exceptions import CallCancelledError, CallTimeoutError, CancellationError

logger = logging.getLogger(__name__)

CancelCallback = Callable[[CancellationError], None]


class CallContext:
    """Cancellation signal plus optional deadline for client calls.

    Deadlines are absolute ``time.monotonic()`` values (the same clock the
    default asyncio event loop uses).

    A parent holds its children weakly and forgets them once they are
    cancelled, so a long-lived parent may spawn any number of per-call
    children.
    """

    __slots__ = ("_deadline", "_event", "_error", "_parent", "_children", "_callbacks", "__weakref__")

    def __init__(self, deadline: Optional[float] = None, parent: Optional["CallContext"] = None) -> None:
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self._deadline = deadline
        self._event = asyncio.Event()
        self._error: Optional[CancellationError] = None
        self._parent: Optional["CallContext"] = None
        self._children: "weakref.WeakSet[CallContext]" = weakref.WeakSet()
        self._callbacks: List[CancelCallback] = []

        if parent is not None:
            if parent._error is not None:
                self._setError(parent._error)
            else:
                self._parent = parent
                parent._children.add(self)

    @classmethod
    def background(cls) -> Self:
        """Context which is never cancelled and has no deadline."""
        return cls()

    @classmethod
    def withDeadline(cls, deadline: float, parent: Optional["CallContext"] = None) -> Self:
        """Context expiring at given ``time.monotonic()`` instant."""
        return cls(deadline=deadline, parent=parent)

    @classmethod
    def withTimeout(cls, timeout: float, parent: Optional["CallContext"] = None) -> Self:
        """Context expiring ``timeout`` seconds from now."""
        return cls(deadline=time.monotonic() + timeout, parent=parent)

    def withCancel(self) -> "CallContext":
        """Child context which can be cancelled independently of this one."""
        return CallContext(parent=self)

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        """Whether cancel() was called on this context or one of its parents."""
        return self._error is not None

    def expired(self) -> bool:
        """Whether the deadline has passed."""
        return self._deadline is not None and time.monotonic() >= self._deadline

    def done(self) -> bool:
        return self.cancelled or self.expired()

    def remaining(self) -> Optional[float]:
        """Seconds left until the deadline, None if there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def error(self) -> Optional[CancellationError]:
        """Return the reason this context is done, or None while it's still active."""
        if self._error is not None:
            return self._error
        if self.expired():
            return CallTimeoutError()
        return None

    def cancel(self) -> None:
        """Cancel this context and all of its children.

        Cancelling an already expired context keeps the timeout as its error.
        """
        if self._error is not None:
            return
        self._setError(CallTimeoutError() if self.expired() else CallCancelledError())

    def addCancelCallback(self, callback: CancelCallback) -> None:
        """Call callback(error) once this context is cancelled.

        Called immediately if it is cancelled already. Deadline expiry does
        not trigger callbacks, use remaining() to wait for it.
        """
        if self._error is not None:
            callback(self._error)
            return
        self._callbacks.append(callback)

    def removeCancelCallback(self, callback: CancelCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _setError(self, error: CancellationError) -> None:
        self._error = error
        self._event.set()

        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(error)

        if self._parent is not None:
            self._parent._children.discard(self)
            self._parent = None

        for child in list(self._children):
            if child._error is None:
                child._setError(error)
        self._children.clear()

    async def wait(self) -> CancellationError:
        """Wait until this context is cancelled or its deadline passes.

        Returns:
            The error describing why the context is done
        """
        while True:
            error = self.error()
            if error is not None:
                return error

            remaining = self.remaining()
            if remaining is None:
                await self._event.wait()
                continue
            # Event loop may wake us up slightly before the deadline, so loop until error() is set
            try:
                await asyncio.wait_for(self._event.wait(), timeout=remaining)
            except asyncio.TimeoutError:
                pass

    def __repr__(self) -> str:
        return f"CallContext(deadline={self._deadline!r}, error={self._error!r})"
