"""Cancellation contexts checked by the retry loop between attempts."""

from __future__ import annotations

import threading
import time
from typing import Optional, Protocol, runtime_checkable


class ContextError(RuntimeError):
    """Base class for reasons a context reports itself as done."""


class Cancelled(ContextError):
    """The context was cancelled explicitly."""

    def __init__(self) -> None:
        super().__init__("context cancelled")


class DeadlineExceeded(ContextError):
    """The context deadline passed."""

    def __init__(self) -> None:
        super().__init__("context deadline exceeded")


@runtime_checkable
class CancellationContext(Protocol):
    """Anything that can tell a retry loop to stop."""

    def err(self) -> Optional[Exception]:
        """Return why the context is done, or ``None`` while it is live."""
        ...

    @property
    def done(self) -> bool:
        ...


class _Background:
    """Context that is never cancelled and never expires."""

    def err(self) -> Optional[Exception]:
        return None

    @property
    def done(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "background()"


_BACKGROUND = _Background()


def background() -> CancellationContext:
    """Return the shared never-cancelling context."""
    return _BACKGROUND


class CancelContext:
    """Context cancelled by calling :meth:`cancel`, optionally with a deadline.

    A parent context's error is inherited: once the parent is done this
    context reports the parent's error. Safe to cancel from another thread.
    """

    def __init__(
        self,
        parent: Optional[CancellationContext] = None,
        *,
        deadline: float | None = None,
    ) -> None:
        self._parent = parent if parent is not None else background()
        self._deadline = deadline
        self._lock = threading.Lock()
        self._error: Optional[Exception] = None

    @property
    def deadline(self) -> float | None:
        """Deadline on the ``time.monotonic`` clock, if any."""
        return self._deadline

    def cancel(self) -> None:
        with self._lock:
            if self._error is None:
                self._error = Cancelled()

    def remaining(self) -> float | None:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def err(self) -> Optional[Exception]:
        with self._lock:
            if self._error is not None:
                return self._error
        parent_error = self._parent.err()
        if parent_error is not None:
            return parent_error
        if self._deadline is not None and time.monotonic() >= self._deadline:
            with self._lock:
                if self._error is None:
                    self._error = DeadlineExceeded()
                return self._error
        return None

    @property
    def done(self) -> bool:
        return self.err() is not None

    def __repr__(self) -> str:
        state = type(self._error).__name__ if self._error else "live"
        return f"CancelContext(state={state}, deadline={self._deadline!r})"


def with_cancel(parent: Optional[CancellationContext] = None) -> CancelContext:
    """Return a cancellable child of ``parent`` (or of ``background()``)."""
    return CancelContext(parent)


def with_deadline(deadline: float, parent: Optional[CancellationContext] = None) -> CancelContext:
    """Return a context that expires at ``deadline`` on the monotonic clock.

    A parent deadline that is earlier still applies because the parent's
    error is inherited.
    """
    return CancelContext(parent, deadline=deadline)


def with_timeout(seconds: float, parent: Optional[CancellationContext] = None) -> CancelContext:
    """Return a context that expires ``seconds`` from now."""
    if seconds < 0:
        raise ValueError("seconds must be >= 0")
    return with_deadline(time.monotonic() + seconds, parent)


__all__ = [
    "CancelContext",
    "CancellationContext",
    "Cancelled",
    "ContextError",
    "DeadlineExceeded",
    "background",
    "with_cancel",
    "with_deadline",
    "with_timeout",
]
