"""Unit tests for observability wiring"""
from unittest.mock import patch

from prometheus_client import REGISTRY

from mindmate.conversation.classifier import classify_message
from mindmate.observability import metrics
from mindmate.observability.sentry_config import init_sentry


def test_sentry_disabled_by_default():
    with patch('mindmate.config.ENABLE_SENTRY', False):
        assert init_sentry() is False


def test_sentry_enabled_without_dsn():
    with patch('mindmate.config.ENABLE_SENTRY', True), patch('mindmate.config.SENTRY_DSN', ""):
        assert init_sentry() is False


def test_sentry_init_uses_logging_integration():
    with patch('mindmate.config.ENABLE_SENTRY', True), \
         patch('mindmate.config.SENTRY_DSN', "https://key@sentry.example.com/1"), \
         patch('mindmate.observability.sentry_config.sentry_sdk.init') as sentry_init:
        assert init_sentry() is True

    kwargs = sentry_init.call_args.kwargs
    assert kwargs["send_default_pii"] is False
    assert kwargs["release"].startswith("mindmate@")


def test_metric_names_registered():
    metrics.crisis_detections_total.inc(0)
    assert REGISTRY.get_sample_value("mindmate_crisis_detections_total") is not None


def test_classification_counter_by_category():
    before = REGISTRY.get_sample_value(
        "mindmate_messages_classified_total", {"category": "anxiety"}
    ) or 0.0
    metrics.messages_classified_total.labels(category=classify_message("I'm anxious").category.value).inc()
    after = REGISTRY.get_sample_value("mindmate_messages_classified_total", {"category": "anxiety"})
    assert after == before + 1
