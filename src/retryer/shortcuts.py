"""One-call helpers for the common retry shapes."""

from __future__ import annotations

from typing import TypeVar

from retryer.context import CancellationContext, background
from retryer.core import Delay, Operation, Outcome, Retryer

T = TypeVar("T")


def once(operation: Operation[T]) -> Outcome[T]:
    """Retry ``operation`` once if it fails."""
    return once_ctx(background(), operation)


def once_ctx(context: CancellationContext, operation: Operation[T]) -> Outcome[T]:
    """Retry ``operation`` once if it fails, unless ``context`` is done."""
    return Retryer(operation, max_retries=1, context=context).run()


def once_delayed(operation: Operation[T], delay: Delay) -> Outcome[T]:
    """Retry ``operation`` once, after ``delay``, if it fails."""
    return once_delayed_ctx(background(), operation, delay)


def once_delayed_ctx(context: CancellationContext, operation: Operation[T], delay: Delay) -> Outcome[T]:
    return Retryer(operation, max_retries=1, context=context, delay=delay).run()


def times(amount: int, operation: Operation[T]) -> Outcome[T]:
    """Retry ``operation`` up to ``amount`` times while it fails."""
    return times_ctx(background(), amount, operation)


def times_ctx(context: CancellationContext, amount: int, operation: Operation[T]) -> Outcome[T]:
    return Retryer(operation, max_retries=amount, context=context).run()


def times_delayed(amount: int, operation: Operation[T], delay: Delay) -> Outcome[T]:
    """Retry ``operation`` up to ``amount`` times, sleeping ``delay`` between attempts."""
    return times_delayed_ctx(background(), amount, operation, delay)


def times_delayed_ctx(
    context: CancellationContext, amount: int, operation: Operation[T], delay: Delay
) -> Outcome[T]:
    return Retryer(operation, max_retries=amount, context=context, delay=delay).run()


__all__ = [
    "once",
    "once_ctx",
    "once_delayed",
    "once_delayed_ctx",
    "times",
    "times_ctx",
    "times_delayed",
    "times_delayed_ctx",
]
