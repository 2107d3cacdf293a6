"""Functional options for building a RetryConfig.

Each ``with_*`` constructor returns an option: a function taking the
configuration built so far and returning an updated copy. Options are applied
in the order given, so later options win. Validation runs once, after all
options have been applied.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from pydantic import ValidationError

from retrier.domain.backoff import BackoffFunc
from retrier.domain.config import RetryConfig
from retrier.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

Option = Callable[[RetryConfig], RetryConfig]


def _override(**update: Any) -> Option:
    def option(config: RetryConfig) -> RetryConfig:
        return config.model_copy(update=update)

    return option


def with_max_retries(max_retries: int) -> Option:
    """Limit retries after the first attempt (INFINITY for no limit)"""
    return _override(max_retries=max_retries)


def with_base_delay(base_delay: float) -> Option:
    """Set the initial delay in seconds"""
    return _override(base_delay=base_delay)


def with_max_delay(max_delay: float) -> Option:
    """Set the upper bound for computed delays in seconds"""
    return _override(max_delay=max_delay)


def with_should_retry(should_retry: Callable[[Exception], bool]) -> Option:
    """Set the predicate deciding whether an operation error may be retried"""
    return _override(should_retry=should_retry)


def with_calculate_delay(calculate_delay: BackoffFunc) -> Option:
    """Set the backoff function"""
    return _override(calculate_delay=calculate_delay)


def with_log(log: Callable[..., None]) -> Option:
    """Set the printf-style progress sink"""
    return _override(log=log)


def with_sleep(sleep: Callable[[float], None]) -> Option:
    """Set the blocking wait used between attempts"""
    return _override(sleep=sleep)


def build_config(options: Iterable[Option]) -> RetryConfig:
    """Apply options to the default configuration and validate the result

    Args:
        options: Options applied in order

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If the resulting configuration is invalid
    """
    config = RetryConfig()
    for option in options:
        config = option(config)

    try:
        # model_copy skips validation, so re-validate the final field values
        return RetryConfig.model_validate(dict(config))
    except ValidationError as e:
        errors = []
        for error in e.errors():
            field = ".".join(str(x) for x in error["loc"]) or "config"
            errors.append(f"  - {field}: {error['msg']}")
        logger.debug(f"Rejected retry configuration: {e}")
        raise ConfigurationError(
            "Retry configuration validation failed:\n" + "\n".join(errors)
        ) from e
