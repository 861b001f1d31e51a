"""
Prometheus metrics definitions for MindMate.

Metrics are organized by category:
- Conversation metrics: classification outcomes, crisis detections, replies
- Persistence metrics: failed store operations
- Achievement metrics: badges granted, evaluation latency
"""

import logging
from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

# =============================================================================
# Conversation Metrics
# =============================================================================

messages_classified_total = Counter(
    "mindmate_messages_classified_total",
    "User messages classified, by category",
    ["category"],
)

crisis_detections_total = Counter(
    "mindmate_crisis_detections_total",
    "Messages that triggered the crisis response",
)

bot_responses_total = Counter(
    "mindmate_bot_responses_total",
    "Bot messages emitted",
    ["kind"],  # kind: greeting/primary/follow_up
)

follow_ups_cancelled_total = Counter(
    "mindmate_follow_ups_cancelled_total",
    "Scheduled follow-ups cancelled because their session ended",
)

# =============================================================================
# Persistence Metrics
# =============================================================================

persistence_failures_total = Counter(
    "mindmate_persistence_failures_total",
    "Store operations that failed",
    ["operation"],
)

# =============================================================================
# Achievement Metrics
# =============================================================================

badges_granted_total = Counter(
    "mindmate_badges_granted_total",
    "Badges newly granted",
    ["badge_type"],
)

achievement_evaluation_duration_seconds = Histogram(
    "mindmate_achievement_evaluation_duration_seconds",
    "Time spent evaluating achievements for one user",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


def start_metrics_server(port: int) -> None:
    """Expose /metrics for Prometheus scraping"""
    start_http_server(port)
    logger.info(f"Prometheus metrics server listening on port {port}")
