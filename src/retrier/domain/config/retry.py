"""Retry configuration model."""

import time
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from retrier.domain.backoff import BackoffFunc, binary_backoff

DEFAULT_MAX_RETRIES = 10
DEFAULT_BASE_DELAY = 0.001  # 1ms
DEFAULT_MAX_DELAY = 60.0  # 1 minute
INFINITY = -1  # max_retries value for "retry until success or veto"


def _always_retry(error: Exception) -> bool:
    return True


def _discard_log(fmt: str, *args: Any) -> None:
    pass


class RetryConfig(BaseModel):
    """Configuration for retry logic.

    Instances are immutable; options derive new instances with ``model_copy``.

    Attributes:
        max_retries: Retries allowed after the first attempt (INFINITY = unlimited)
        base_delay: Initial delay in seconds
        max_delay: Upper bound for any computed delay in seconds
        should_retry: Predicate over the operation error; False aborts immediately
        calculate_delay: Backoff function (attempt, base_delay, max_delay) -> delay
        log: Printf-style progress sink, e.g. ``logging.getLogger(...).info``
        sleep: Blocking wait used between attempts
    """

    max_retries: int = Field(DEFAULT_MAX_RETRIES, ge=INFINITY)
    base_delay: float = Field(DEFAULT_BASE_DELAY, ge=0.0, allow_inf_nan=False)
    max_delay: float = Field(DEFAULT_MAX_DELAY, ge=0.0, allow_inf_nan=False)
    should_retry: Callable[[Exception], bool] = Field(default=_always_retry)
    calculate_delay: BackoffFunc = Field(default=binary_backoff)
    log: Callable[..., None] = Field(default=_discard_log)
    sleep: Callable[[float], None] = Field(default=time.sleep)

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",  # Reject unknown fields
    )

    @model_validator(mode="after")
    def check_delay_bounds(self) -> "RetryConfig":
        if self.base_delay > self.max_delay:
            raise ValueError(
                f"base_delay ({self.base_delay}) must not exceed max_delay ({self.max_delay})"
            )
        return self

    @property
    def unlimited(self) -> bool:
        """Check if retries are unlimited"""
        return self.max_retries == INFINITY
