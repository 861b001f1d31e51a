"""
Crisis detection

Runs before any other classification and is never skipped. Matching is plain
substring search over normalized text, so indicators fire anywhere inside a
longer sentence.
"""

import logging

from mindmate.conversation.patterns import CRISIS_RULES, normalize_text

logger = logging.getLogger(__name__)

CRISIS_RESPONSE = (
    "I'm really worried about you right now, and I want you to know that your life has immense value. 💜 "
    "Please reach out for immediate help:\n\n"
    "🚨 **Crisis Support:**\n"
    "• National Suicide Prevention Lifeline: **988**\n"
    "• Crisis Text Line: Text HOME to **741741**\n"
    "• Emergency Services: **911**\n\n"
    "You don't have to face this alone. There are people who care about you and want to help. "
    "Can you reach out to someone you trust right now? I'm here with you."
)

CRISIS_FOLLOW_UP = (
    "If you're in immediate danger, please call **988** (Suicide & Crisis Lifeline) or **911** now. "
    "You can also text HOME to **741741** to talk with a trained crisis counselor, any time, day or night. 💙"
)


def matched_crisis_indicators(text) -> list[str]:
    """Return every crisis indicator found in the text, in declaration order"""
    normalized = normalize_text(text)
    return [rule.name for rule in CRISIS_RULES if rule.matches(normalized)]


def detect_crisis(text) -> bool:
    """True when the text contains any crisis indicator"""
    normalized = normalize_text(text)
    for rule in CRISIS_RULES:
        if rule.matches(normalized):
            logger.warning(f"Crisis indicator matched: '{rule.name}'")
            return True
    return False
