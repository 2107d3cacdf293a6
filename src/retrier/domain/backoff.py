"""Backoff functions - map an attempt number to a wait duration.

Every backoff function has the signature ``(attempt, base_delay, max_delay) -> delay``
where ``attempt`` is zero-based and all durations are in seconds. The result must
stay within ``[0, max_delay]``.
"""

import math
import random
from typing import Callable, Optional

BackoffFunc = Callable[[int, float, float], float]


def binary_backoff(attempt: int, base_delay: float, max_delay: float) -> float:
    """Double the base delay on every attempt, capped at max_delay"""
    try:
        delay = math.ldexp(base_delay, attempt)
    except OverflowError:
        # only a positive base can overflow, and then the delay exceeds any finite max
        return max_delay
    return min(delay, max_delay)


def fixed_backoff(attempt: int, base_delay: float, max_delay: float) -> float:
    """Always wait base_delay"""
    return min(base_delay, max_delay)


def linear_backoff(step: float) -> BackoffFunc:
    """Create a backoff that adds ``step`` seconds per attempt

    Args:
        step: Seconds added to the base delay for every attempt

    Returns:
        Backoff function
    """
    if step < 0:
        raise ValueError("Linear backoff step must be >= 0")

    def _backoff(attempt: int, base_delay: float, max_delay: float) -> float:
        return min(base_delay + attempt * step, max_delay)

    return _backoff


def exponential_backoff(multiplier: float = 2.0) -> BackoffFunc:
    """Create a backoff growing by ``multiplier`` per attempt

    Args:
        multiplier: Growth factor, must be >= 1.0

    Returns:
        Backoff function
    """
    if multiplier < 1.0:
        raise ValueError("Exponential backoff multiplier must be >= 1.0")

    def _backoff(attempt: int, base_delay: float, max_delay: float) -> float:
        try:
            delay = base_delay * multiplier**attempt
        except OverflowError:
            return max_delay if base_delay > 0 else 0.0
        return min(delay, max_delay)

    return _backoff


def jittered(
    backoff: BackoffFunc,
    ratio: float = 0.1,
    rng: Optional[random.Random] = None,
) -> BackoffFunc:
    """Spread the delays of another backoff by +/- ``ratio``

    Args:
        backoff: Backoff function to wrap
        ratio: Jitter factor (0.0-1.0)
        rng: Random source (module-level ``random`` if None)

    Returns:
        Backoff function
    """
    if not 0.0 <= ratio <= 1.0:
        raise ValueError("Jitter ratio must be between 0.0 and 1.0")
    source = rng or random

    def _backoff(attempt: int, base_delay: float, max_delay: float) -> float:
        delay = backoff(attempt, base_delay, max_delay)
        spread = delay * ratio
        delay += source.uniform(-spread, spread)
        return min(max(delay, 0.0), max_delay)

    return _backoff


def format_delay(seconds: float) -> str:
    """Format a delay for log messages, e.g. ``10ms``, ``1.5s`` or ``2m0s``"""
    if seconds <= 0:
        return "0s"
    if math.isinf(seconds):
        return "inf"
    if seconds < 1e-3:
        return f"{seconds * 1e6:g}us"
    if seconds < 1:
        return f"{seconds * 1e3:g}ms"
    if seconds < 60:
        return f"{seconds:g}s"

    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(int(minutes), 60)
    text = f"{minutes}m{secs:g}s"
    if hours:
        text = f"{hours}h{text}"
    return text
