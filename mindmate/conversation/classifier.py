"""
Emotion classifier

A single linear scan over the ordered tier table in patterns.py. The first
tier with a matching rule wins; inside a tier, the first matching rule in
declaration order wins. There is no scoring. Every input ends in exactly one
classification, with NEUTRAL as the fallback.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from mindmate.conversation.crisis import detect_crisis
from mindmate.conversation.patterns import (
    CLASSIFICATION_TIERS,
    FALLBACK_CATEGORY,
    TIPS_REQUEST,
    FeatureTopic,
    normalize_text,
)
from mindmate.models.conversation import EmotionCategory, ResponseIntent

logger = logging.getLogger(__name__)

# Category persisted on a user message that was answered by an intent pool
INTENT_CATEGORIES: dict[ResponseIntent, EmotionCategory] = {
    ResponseIntent.GREETING: EmotionCategory.NEUTRAL,
    ResponseIntent.GRATITUDE: EmotionCategory.POSITIVE,
}


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one message"""
    category: EmotionCategory
    intent: Optional[ResponseIntent] = None
    feature: Optional[FeatureTopic] = None
    asking_for_tips: bool = False
    matched_rule: Optional[str] = None

    @property
    def is_crisis(self) -> bool:
        return self.category is EmotionCategory.CRISIS


def classify_message(text) -> Classification:
    """
    Classify one inbound message

    Args:
        text: Raw user input. Empty, whitespace-only or non-string input is
            treated as the session-start greeting trigger.

    Returns:
        Classification with exactly one category
    """
    # Crisis is checked first and unconditionally, including for empty input
    if detect_crisis(text):
        return Classification(category=EmotionCategory.CRISIS, matched_rule="crisis")

    normalized = normalize_text(text)
    if not normalized:
        return Classification(
            category=INTENT_CATEGORIES[ResponseIntent.GREETING],
            intent=ResponseIntent.GREETING,
            matched_rule="empty_input",
        )

    for tier in CLASSIFICATION_TIERS:
        if tier.route is EmotionCategory.CRISIS:
            continue  # handled above
        for rule in tier.rules:
            if not rule.matches(normalized):
                continue

            logger.debug(f"Matched rule '{rule.name}' in tier '{tier.route.value}'")
            if isinstance(tier.route, ResponseIntent):
                return Classification(
                    category=INTENT_CATEGORIES[tier.route],
                    intent=tier.route,
                    matched_rule=rule.name,
                )
            return Classification(
                category=tier.route,
                feature=rule.feature,
                asking_for_tips=TIPS_REQUEST.matches(normalized),
                matched_rule=rule.name,
            )

    return Classification(category=FALLBACK_CATEGORY, matched_rule=None)


def detect_emotion(text) -> EmotionCategory:
    """Category label only"""
    return classify_message(text).category
