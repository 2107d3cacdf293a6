"""Retry executor using tenacity.

``retry`` wraps a fallible operation into a callable with the same signature
that re-invokes the operation until it succeeds, the retry limit is reached,
or the configured ``should_retry`` predicate vetoes another attempt.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, List, TypeVar

from tenacity import (
    RetryCallState,
    RetryError as TenacityRetryError,
    Retrying,
    TryAgain,
    retry_if_exception,
    stop_after_attempt,
    stop_never,
)
from tenacity.wait import wait_base

from retrier.domain.backoff import format_delay
from retrier.domain.config import RetryConfig
from retrier.domain.errors import RetryAbortedError, RetryLimitExceededError
from retrier.infrastructure.options import Option, build_config

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _OperationTryAgain(Exception):
    """Carries a TryAgain raised by the operation so should_retry classifies it like any other error"""

    def __init__(self, error: TryAgain):
        super().__init__(str(error))
        self.error = error


def _unwrap(exception: BaseException) -> BaseException:
    if isinstance(exception, _OperationTryAgain):
        return exception.error
    return exception


class BackoffWait(wait_base):
    """tenacity wait strategy delegating to the configured backoff function"""

    def __init__(self, config: RetryConfig):
        self.config = config

    def __call__(self, retry_state: RetryCallState) -> float:
        # tenacity counts attempts from 1, backoff functions from 0
        return self.config.calculate_delay(
            retry_state.attempt_number - 1,
            self.config.base_delay,
            self.config.max_delay,
        )


def _create_controller(config: RetryConfig) -> Retrying:
    """Create the tenacity controller shared by all invocations of a wrapped callable"""
    if config.unlimited:
        stop = stop_never
    else:
        stop = stop_after_attempt(config.max_retries + 1)

    def _before(retry_state: RetryCallState) -> None:
        attempt = retry_state.attempt_number - 1
        if attempt > 0:
            config.log("Retrying attempt %d", attempt)

    def _before_sleep(retry_state: RetryCallState) -> None:
        if retry_state.next_action is None:
            return
        config.log("Will retry in %s", format_delay(retry_state.next_action.sleep))

    return Retrying(
        stop=stop,
        wait=BackoffWait(config),
        before=_before,
        before_sleep=_before_sleep,
        sleep=config.sleep,
        reraise=False,
    )


def retry(operation: Callable[..., T], *options: Option) -> Callable[..., T]:
    """Wrap an operation with retry logic

    Args:
        operation: Fallible callable; raising an Exception marks the attempt as failed
        *options: Configuration overrides applied in order (see ``retrier.infrastructure.options``)

    Returns:
        Callable with the operation's signature. It returns the operation's result
        or raises RetryAbortedError / RetryLimitExceededError chained to the last
        operation error.

    Raises:
        ConfigurationError: If the options produce an invalid configuration
    """
    config = build_config(options)
    controller = _create_controller(config)

    @functools.wraps(operation)
    def wrapped(*args: Any, **kwargs: Any) -> T:
        vetoed: List[Exception] = []

        def _attempt() -> T:
            try:
                return operation(*args, **kwargs)
            except TryAgain as e:
                raise _OperationTryAgain(e) from e

        def _retry_condition(exception: BaseException) -> bool:
            # KeyboardInterrupt, SystemExit etc. are never retried or wrapped
            if not isinstance(exception, Exception):
                return False
            if config.should_retry(_unwrap(exception)):
                return True
            vetoed.append(exception)
            return False

        # A fresh copy per invocation keeps attempt counters independent
        retrying_call = controller.copy(retry=retry_if_exception(_retry_condition))
        try:
            return retrying_call(_attempt)
        except Exception as e:
            if vetoed and e is vetoed[-1]:
                cause = _unwrap(e)
                logger.debug(f"Retry vetoed by should_retry: {cause}")
                raise RetryAbortedError(cause) from cause
            if isinstance(e, TenacityRetryError):
                cause = _unwrap(e.last_attempt.exception())
                logger.debug(f"Giving up after {config.max_retries + 1} attempts: {cause}")
                raise RetryLimitExceededError(config.max_retries, cause) from cause
            raise

    wrapped.retry_config = config  # type: ignore[attr-defined]
    return wrapped


def retrying(*options: Option) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator form of ``retry``"""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        return retry(func, *options)

    return decorator
