"""Unit tests for configuration validation (mindmate/config.py)"""
import pytest

from mindmate import config
from mindmate.exceptions import ConfigurationError


@pytest.fixture
def valid_config(monkeypatch):
    monkeypatch.setattr(config, "DATABASE_URL", "postgresql://localhost/mindmate")
    monkeypatch.setattr(config, "LOG_LEVEL", "INFO")
    monkeypatch.setattr(config, "FOLLOW_UP_DELAY_SECONDS", 1.5)
    monkeypatch.setattr(config, "SENTRY_TRACES_SAMPLE_RATE", 0.1)
    monkeypatch.setattr(config, "ENABLE_SENTRY", False)
    monkeypatch.setattr(config, "SENTRY_DSN", "")
    return monkeypatch


def test_valid_config_passes(valid_config):
    config.validate_config()


@pytest.mark.parametrize("attr,value,key", [
    ("DATABASE_URL", "", "DATABASE_URL"),
    ("DATABASE_URL", "mysql://localhost/mindmate", "DATABASE_URL"),
    ("LOG_LEVEL", "VERBOSE", "LOG_LEVEL"),
    ("FOLLOW_UP_DELAY_SECONDS", -1.0, "FOLLOW_UP_DELAY_SECONDS"),
    ("SENTRY_TRACES_SAMPLE_RATE", 1.5, "SENTRY_TRACES_SAMPLE_RATE"),
])
def test_invalid_values(valid_config, attr, value, key):
    valid_config.setattr(config, attr, value)

    with pytest.raises(ConfigurationError) as exc_info:
        config.validate_config()

    assert exc_info.value.config_key == key


def test_sentry_requires_dsn(valid_config):
    valid_config.setattr(config, "ENABLE_SENTRY", True)

    with pytest.raises(ConfigurationError) as exc_info:
        config.validate_config()

    assert exc_info.value.config_key == "SENTRY_DSN"


def test_lowercase_log_level_accepted(valid_config):
    valid_config.setattr(config, "LOG_LEVEL", "debug")
    config.validate_config()
