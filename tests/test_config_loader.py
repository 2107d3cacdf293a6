"""Tests for loading retry options from mappings and environment"""

import pytest

from retrier.domain.config import INFINITY
from retrier.domain.errors import ConfigurationError
from retrier.infrastructure.config.loader import (
    options_from_env,
    options_from_mapping,
    parse_count,
    parse_delay,
)
from retrier.infrastructure.options import build_config, with_max_retries


class TestOptionsFromMapping:
    """Tests for options_from_mapping"""

    def test_canonical_keys(self):
        """Test canonical keys map to options"""
        config = build_config(options_from_mapping({"max_retries": 3, "base_delay": 0.01, "max_delay": 1}))
        assert config.max_retries == 3
        assert config.base_delay == 0.01
        assert config.max_delay == 1.0

    def test_legacy_aliases(self):
        """Test max_attempts counts the first attempt and initial_delay aliases base_delay"""
        config = build_config(options_from_mapping({"max_attempts": 4, "initial_delay": "250ms"}))
        assert config.max_retries == 3
        assert config.base_delay == pytest.approx(0.25)

    def test_unlimited(self):
        """Test unlimited retries from text"""
        config = build_config(options_from_mapping({"retries": "unlimited"}))
        assert config.max_retries == INFINITY

    def test_none_values_skipped(self):
        """Test None values keep the defaults"""
        assert options_from_mapping({"max_retries": None}) == []

    def test_unknown_key(self):
        """Test unknown keys are rejected"""
        with pytest.raises(ConfigurationError, match="backoff_multiplier"):
            options_from_mapping({"backoff_multiplier": 2})

    def test_invalid_value(self):
        """Test unparsable values name the key"""
        with pytest.raises(ConfigurationError, match="max_retries"):
            options_from_mapping({"max_retries": "many"})

    def test_max_attempts_zero(self):
        """Test max_attempts must be at least 1"""
        with pytest.raises(ConfigurationError, match="max_attempts"):
            options_from_mapping({"max_attempts": 0})

    def test_inconsistent_delays_fail_fast(self):
        """Test invalid combinations are reported at load time"""
        with pytest.raises(ConfigurationError, match="must not exceed max_delay"):
            options_from_mapping({"base_delay": "2m", "max_delay": "1m"})

    def test_explicit_option_after_loaded_wins(self):
        """Test loaded options can be overridden"""
        options = options_from_mapping({"max_retries": 3}) + [with_max_retries(8)]
        assert build_config(options).max_retries == 8


class TestOptionsFromEnv:
    """Tests for options_from_env"""

    def test_env_overrides(self, monkeypatch):
        """Test values read from environment variables"""
        monkeypatch.setenv("RETRIER_MAX_RETRIES", "5")
        monkeypatch.setenv("RETRIER_BASE_DELAY", "100ms")
        monkeypatch.setenv("RETRIER_MAX_DELAY", "30s")

        config = build_config(options_from_env())

        assert config.max_retries == 5
        assert config.base_delay == pytest.approx(0.1)
        assert config.max_delay == 30.0

    def test_unset_env(self, monkeypatch):
        """Test no variables means no options"""
        for name in ("RETRIER_MAX_RETRIES", "RETRIER_BASE_DELAY", "RETRIER_MAX_DELAY"):
            monkeypatch.delenv(name, raising=False)
        assert options_from_env() == []

    def test_custom_prefix_and_environ(self):
        """Test a custom prefix with an explicit mapping"""
        environ = {"APP_RETRY_MAX_RETRIES": "infinity", "APP_RETRY_BASE_DELAY": ""}
        config = build_config(options_from_env(prefix="APP_RETRY_", environ=environ))
        assert config.max_retries == INFINITY
        assert config.base_delay == 0.001

    def test_invalid_env(self):
        """Test invalid environment values raise ConfigurationError"""
        with pytest.raises(ConfigurationError, match="max_delay"):
            options_from_env(environ={"RETRIER_MAX_DELAY": "soon"})


class TestParsers:
    """Tests for value parsers"""

    @pytest.mark.parametrize(
        "value, expected",
        [(1.5, 1.5), (2, 2.0), ("3", 3.0), ("0.5s", 0.5), ("250ms", 0.25), ("2m", 120.0), ("1h", 3600.0), ("500us", 0.0005)],
    )
    def test_parse_delay(self, value, expected):
        """Test delay parsing with and without units"""
        assert parse_delay("delay", value) == pytest.approx(expected)

    def test_parse_delay_rejects_bool(self):
        """Test booleans are not durations"""
        with pytest.raises(ConfigurationError):
            parse_delay("delay", True)

    def test_parse_count(self):
        """Test count parsing"""
        assert parse_count("max_retries", "7") == 7
        assert parse_count("max_retries", 4.0) == 4
        assert parse_count("max_retries", "Infinity") == INFINITY

    def test_parse_count_rejects_fraction(self):
        """Test fractional counts are rejected"""
        with pytest.raises(ConfigurationError, match="whole number"):
            parse_count("max_retries", 2.5)
