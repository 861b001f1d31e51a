"""
Gamification for MindMate

One-time achievement badges earned from mood tracking, journaling and chat
activity.
"""

from mindmate.gamification.achievement_system import (
    build_activity_snapshot,
    evaluate_achievements,
    get_user_badges,
)
from mindmate.gamification.badges import BADGE_DEFINITIONS, BadgeDefinition

__all__ = [
    "build_activity_snapshot",
    "evaluate_achievements",
    "get_user_badges",
    "BADGE_DEFINITIONS",
    "BadgeDefinition",
]
