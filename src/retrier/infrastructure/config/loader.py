"""Load retry options from plain mappings and environment variables.

Values loaded here become regular options, so options passed explicitly to
``retry`` after them still win:

    retry(fetch, *options_from_env(), with_log(logger.info))
"""

import logging
import os
import re
from typing import Any, Dict, List, Mapping, Optional

from retrier.domain.config import INFINITY
from retrier.domain.errors import ConfigurationError
from retrier.infrastructure.options import (
    Option,
    build_config,
    with_base_delay,
    with_max_delay,
    with_max_retries,
)

logger = logging.getLogger(__name__)

# Accepted keys -> canonical field. max_attempts counts the first attempt too.
KEY_ALIASES = {
    "max_retries": "max_retries",
    "retries": "max_retries",
    "max_attempts": "max_attempts",
    "base_delay": "base_delay",
    "initial_delay": "base_delay",
    "delay": "base_delay",
    "max_delay": "max_delay",
}

UNLIMITED_VALUES = ("infinity", "unlimited", "inf")

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d*)?|\.\d+)\s*(us|ms|s|m|h)?\s*$")
_UNIT_SECONDS = {"us": 1e-6, "ms": 1e-3, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_count(field: str, value: Any) -> int:
    """Parse a retry/attempt count

    Args:
        field: Field name used in error messages
        value: int or string; "infinity"/"unlimited" map to INFINITY

    Returns:
        Parsed count

    Raises:
        ConfigurationError: If the value is not a whole number
    """
    if isinstance(value, str) and value.strip().lower() in UNLIMITED_VALUES:
        return INFINITY
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid value for {field}: {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ConfigurationError(f"Invalid value for {field}: {value!r} (must be a whole number)")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value for {field}: {value!r}") from e


def parse_delay(field: str, value: Any) -> float:
    """Parse a delay given in seconds or with a unit suffix (``250ms``, ``2s``, ``1m``)

    Raises:
        ConfigurationError: If the value is not a duration
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid value for {field}: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _DURATION_RE.match(value)
        if match:
            number, unit = match.groups()
            return float(number) * _UNIT_SECONDS[unit or "s"]
    raise ConfigurationError(f"Invalid value for {field}: {value!r}")


def options_from_mapping(mapping: Mapping[str, Any]) -> List[Option]:
    """Build options from a configuration mapping

    Keys may use the aliases in KEY_ALIASES. ``None`` values are skipped.

    Args:
        mapping: e.g. the ``retry`` section of an application config file

    Returns:
        Options in mapping order

    Raises:
        ConfigurationError: On unknown keys, unparsable values or an invalid
            resulting configuration
    """
    options: List[Option] = []
    for key, value in mapping.items():
        field = KEY_ALIASES.get(key)
        if field is None:
            raise ConfigurationError(f"Unknown retry configuration key: {key}")
        if value is None:
            continue

        if field == "max_retries":
            options.append(with_max_retries(parse_count(key, value)))
        elif field == "max_attempts":
            attempts = parse_count(key, value)
            if attempts == INFINITY:
                options.append(with_max_retries(INFINITY))
            elif attempts < 1:
                raise ConfigurationError(f"Invalid value for {key}: {value!r} (must be >= 1)")
            else:
                options.append(with_max_retries(attempts - 1))
        elif field == "base_delay":
            options.append(with_base_delay(parse_delay(key, value)))
        else:
            options.append(with_max_delay(parse_delay(key, value)))

    # Fail fast on values that only break once combined
    build_config(options)
    return options


def options_from_env(
    prefix: str = "RETRIER_",
    environ: Optional[Mapping[str, str]] = None,
) -> List[Option]:
    """Build options from environment variables

    Reads ``<prefix>MAX_RETRIES``, ``<prefix>BASE_DELAY`` and ``<prefix>MAX_DELAY``.
    Empty variables are ignored.

    Args:
        prefix: Variable name prefix
        environ: Environment mapping (default: os.environ)

    Returns:
        Options for the variables that are set
    """
    if environ is None:
        environ = os.environ

    config: Dict[str, Any] = {}
    for field in ("max_retries", "base_delay", "max_delay"):
        name = f"{prefix}{field.upper()}"
        value = environ.get(name)
        if value:
            logger.debug(f"Retry {field} overridden by {name}={value}")
            config[field] = value

    return options_from_mapping(config)
