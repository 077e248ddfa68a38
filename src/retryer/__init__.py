"""Retry a fallible operation a bounded number of times."""

from .context import (
    CancelContext,
    CancellationContext,
    Cancelled,
    ContextError,
    DeadlineExceeded,
    background,
    with_cancel,
    with_deadline,
    with_timeout,
)
from .core import Delay, Operation, Outcome, Retrier, Retryer
from .shortcuts import (
    once,
    once_ctx,
    once_delayed,
    once_delayed_ctx,
    times,
    times_ctx,
    times_delayed,
    times_delayed_ctx,
)

__all__ = [
    "CancelContext",
    "CancellationContext",
    "Cancelled",
    "ContextError",
    "DeadlineExceeded",
    "Delay",
    "Operation",
    "Outcome",
    "Retrier",
    "Retryer",
    "background",
    "once",
    "once_ctx",
    "once_delayed",
    "once_delayed_ctx",
    "times",
    "times_ctx",
    "times_delayed",
    "times_delayed_ctx",
    "with_cancel",
    "with_deadline",
    "with_timeout",
]
