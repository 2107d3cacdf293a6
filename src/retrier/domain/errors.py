"""Errors raised by the retrier"""

from enum import Enum
from typing import Optional


class RetryFailure(str, Enum):
    """Why the retrier gave up"""

    ABORTED = "aborted"  # should_retry vetoed another attempt
    EXHAUSTED = "exhausted"  # max_retries reached


class RetryError(Exception):
    """Base class for terminal retrier failures.

    Attributes:
        cause: Exception raised by the last attempt of the operation
        kind: Failure kind
    """

    kind: RetryFailure

    def __init__(self, message: str, cause: Optional[BaseException]):
        super().__init__(message)
        self.cause = cause


class RetryAbortedError(RetryError):
    """The retry predicate rejected the operation error"""

    kind = RetryFailure.ABORTED

    def __init__(self, cause: Optional[BaseException]):
        super().__init__(
            f"Retrier aborted due to user supplied should_retry func. Cause: {cause}",
            cause,
        )


class RetryLimitExceededError(RetryError):
    """The operation kept failing until the retry limit was reached"""

    kind = RetryFailure.EXHAUSTED

    def __init__(self, max_retries: int, cause: Optional[BaseException]):
        self.max_retries = max_retries
        super().__init__(
            f"Retrier exceeded max retry count of {max_retries}. Cause: {cause}",
            cause,
        )


class ConfigurationError(ValueError):
    """Retry configuration validation error."""

    pass
