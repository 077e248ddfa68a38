"""Bounded retry loop with optional fixed delay and cooperative cancellation."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from datetime import timedelta
from typing import TYPE_CHECKING, Generic, NamedTuple, Optional, TypeVar, Union

from retryer.context import CancellationContext, background

if TYPE_CHECKING:  # pragma: no cover
    from retryer.config.models import RetrySettings

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Outcome(NamedTuple, Generic[T]):
    """Result of one attempt, or of a whole retry run.

    ``error`` is ``None`` exactly when the operation succeeded. ``result`` is
    whatever the operation produced, which may be set on failure when the
    operation returned an ``Outcome`` itself.
    """

    result: Optional[T]
    error: Optional[Exception]

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Optional[T]:
        """Return the result, raising the error unchanged on failure."""
        if self.error is not None:
            raise self.error
        return self.result


Operation = Callable[[], Union[T, Outcome[T]]]
Delay = Union[float, int, timedelta]


def _to_seconds(delay: Delay | None) -> float | None:
    if delay is None:
        return None
    seconds = delay.total_seconds() if isinstance(delay, timedelta) else float(delay)
    if not math.isfinite(seconds) or seconds < 0:
        raise ValueError("delay must be a finite number >= 0")
    return seconds


def _attempt(operation: Operation[T]) -> Outcome[T]:
    try:
        value = operation()
    except Exception as exc:  # noqa: BLE001 - every error is retryable
        return Outcome(None, exc)
    if isinstance(value, Outcome):
        return value
    return Outcome(value, None)


class Retryer(Generic[T]):
    """Run ``operation`` until it succeeds, the context is done, or retries run out.

    ``max_retries`` counts additional attempts after the first one, so the
    operation is invoked at most ``max_retries + 1`` times. The context is only
    consulted after a failed attempt. ``delay`` (seconds or ``timedelta``) is
    slept between a failure and the next attempt.
    """

    def __init__(
        self,
        operation: Operation[T],
        *,
        max_retries: int,
        context: Optional[CancellationContext] = None,
        delay: Delay | None = None,
    ) -> None:
        if not callable(operation):
            raise TypeError("operation must be callable")
        if isinstance(max_retries, bool) or not isinstance(max_retries, int):
            raise TypeError("max_retries must be an int")
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")

        self.operation = operation
        self.max_retries = max_retries
        self.context: CancellationContext = context if context is not None else background()
        self.delay = _to_seconds(delay)
        self.ran = 0
        self._attempts = 0

    @classmethod
    def from_settings(
        cls,
        operation: Operation[T],
        settings: "RetrySettings",
        *,
        context: Optional[CancellationContext] = None,
    ) -> "Retryer[T]":
        return cls(
            operation,
            max_retries=settings.max_retries,
            context=context,
            delay=settings.delay_seconds,
        )

    @property
    def attempts(self) -> int:
        """Number of times the operation has been invoked."""
        return self._attempts

    def run(self) -> Outcome[T]:
        while True:
            outcome = _attempt(self.operation)
            self._attempts += 1
            if outcome.error is None:
                return outcome

            logger.debug("Attempt %s failed: %r", self._attempts, outcome.error)
            if self.context.err() is not None:
                logger.debug("Context done after attempt %s; giving up", self._attempts)
                return outcome
            if self.ran == self.max_retries:
                logger.debug("Retry budget of %s exhausted; giving up", self.max_retries)
                return outcome

            if self.delay is not None:
                logger.debug("Sleeping %.3fs before retry %s", self.delay, self.ran + 1)
                time.sleep(self.delay)
            self.ran += 1

    def __repr__(self) -> str:
        return (
            f"Retryer(max_retries={self.max_retries}, ran={self.ran}, "
            f"delay={self.delay!r}, context={self.context!r})"
        )


Retrier = Retryer


__all__ = ["Delay", "Operation", "Outcome", "Retrier", "Retryer"]
