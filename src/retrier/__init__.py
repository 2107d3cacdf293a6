"""Generic retry executor with pluggable backoff"""

from retrier.domain.backoff import (
    BackoffFunc,
    binary_backoff,
    exponential_backoff,
    fixed_backoff,
    format_delay,
    jittered,
    linear_backoff,
)
from retrier.domain.config import (
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_RETRIES,
    INFINITY,
    RetryConfig,
)
from retrier.domain.errors import (
    ConfigurationError,
    RetryAbortedError,
    RetryError,
    RetryFailure,
    RetryLimitExceededError,
)
from retrier.infrastructure.config.loader import options_from_env, options_from_mapping
from retrier.infrastructure.options import (
    Option,
    build_config,
    with_base_delay,
    with_calculate_delay,
    with_log,
    with_max_delay,
    with_max_retries,
    with_should_retry,
    with_sleep,
)
from retrier.infrastructure.retry import retry, retrying

__all__ = [
    "retry",
    "retrying",
    "Option",
    "build_config",
    "with_max_retries",
    "with_base_delay",
    "with_max_delay",
    "with_should_retry",
    "with_calculate_delay",
    "with_log",
    "with_sleep",
    "options_from_mapping",
    "options_from_env",
    "RetryConfig",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_BASE_DELAY",
    "DEFAULT_MAX_DELAY",
    "INFINITY",
    "BackoffFunc",
    "binary_backoff",
    "fixed_backoff",
    "linear_backoff",
    "exponential_backoff",
    "jittered",
    "format_delay",
    "RetryError",
    "RetryAbortedError",
    "RetryLimitExceededError",
    "RetryFailure",
    "ConfigurationError",
]
