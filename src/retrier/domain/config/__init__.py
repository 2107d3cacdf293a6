"""Configuration models with Pydantic validation."""

from retrier.domain.config.retry import (
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_RETRIES,
    INFINITY,
    RetryConfig,
)

__all__ = [
    "RetryConfig",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_BASE_DELAY",
    "DEFAULT_MAX_DELAY",
    "INFINITY",
]
