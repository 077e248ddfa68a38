from __future__ import annotations

from typing import Any, Callable

from retryer.core import Outcome


class Flaky:
    """Operation that fails ``failures`` times before returning ``value``.

    ``failures=None`` means it never succeeds. Each failing call returns an
    ``Outcome`` carrying the attempt number as its result so tests can tell
    which invocation produced the final pair.
    """

    def __init__(
        self,
        failures: int | None,
        *,
        value: Any = "ok",
        error: Exception | None = None,
        on_call: Callable[[int], None] | None = None,
    ) -> None:
        self.failures = failures
        self.value = value
        self.error = error if error is not None else ValueError("not yet")
        self.on_call = on_call
        self.calls = 0

    def __call__(self) -> Outcome[Any]:
        self.calls += 1
        if self.on_call is not None:
            self.on_call(self.calls)
        if self.failures is None or self.calls <= self.failures:
            return Outcome(f"attempt-{self.calls}", self.error)
        return Outcome(self.value, None)


class Raising:
    """Operation that raises on every call, counting invocations."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error if error is not None else RuntimeError("boom")
        self.calls = 0

    def __call__(self) -> Any:
        self.calls += 1
        raise self.error
