"""Pydantic models describing retry configuration."""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RetrySettings(BaseModel):
    """Retry budget and fixed delay for a :class:`retryer.core.Retryer`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_retries: int = Field(default=1, ge=0)
    delay_seconds: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)

    @property
    def delay(self) -> Optional[timedelta]:
        if self.delay_seconds is None:
            return None
        return timedelta(seconds=self.delay_seconds)


__all__ = ["RetrySettings"]
