"""
Badge definitions

Static configuration: each badge is a predicate over an ActivitySnapshot plus
a progress function for display. Thresholds are fixed here and never change
at runtime.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from mindmate.models.badge import ActivitySnapshot

POSITIVE_VIBES_WINDOW = 7
POSITIVE_VIBES_THRESHOLD = 4.0


@dataclass(frozen=True)
class BadgeDefinition:
    """A badge a user can earn once"""
    badge_type: str
    name: str
    description: str
    requirement: str
    icon: str
    predicate: Callable[[ActivitySnapshot], bool]
    progress: Callable[[ActivitySnapshot], tuple[int, int]]  # (current, required)


def _count_badge(attr: str, threshold: int):
    def predicate(snapshot: ActivitySnapshot) -> bool:
        return getattr(snapshot, attr) >= threshold

    def progress(snapshot: ActivitySnapshot) -> tuple[int, int]:
        return min(getattr(snapshot, attr), threshold), threshold

    return predicate, progress


def recent_mood_average(levels: list[int], window: int = POSITIVE_VIBES_WINDOW) -> Optional[float]:
    """Mean of the newest `window` levels, or None when fewer are available"""
    if len(levels) < window:
        return None
    recent = levels[:window]
    return sum(recent) / window


def _positive_vibes(snapshot: ActivitySnapshot) -> bool:
    average = snapshot.recent_mood_average
    return average is not None and average >= POSITIVE_VIBES_THRESHOLD


def _positive_vibes_progress(snapshot: ActivitySnapshot) -> tuple[int, int]:
    if _positive_vibes(snapshot):
        return POSITIVE_VIBES_WINDOW, POSITIVE_VIBES_WINDOW
    return min(len(snapshot.recent_mood_levels), POSITIVE_VIBES_WINDOW - 1), POSITIVE_VIBES_WINDOW


def _wellness_warrior(snapshot: ActivitySnapshot) -> bool:
    return snapshot.mood_entries >= 1 and snapshot.journal_entries >= 1 and snapshot.chat_messages >= 1


def _wellness_warrior_progress(snapshot: ActivitySnapshot) -> tuple[int, int]:
    used = sum(1 for n in (snapshot.mood_entries, snapshot.journal_entries, snapshot.chat_messages) if n >= 1)
    return used, 3


BADGE_DEFINITIONS: tuple[BadgeDefinition, ...] = (
    BadgeDefinition(
        "first_mood", "First Steps", "Logged your first mood entry",
        "Log 1 mood entry", "💗", *_count_badge("mood_entries", 1),
    ),
    BadgeDefinition(
        "mood_week", "Week Tracker", "Tracked mood for 7 days",
        "Log 7 mood entries", "📅", *_count_badge("mood_entries", 7),
    ),
    BadgeDefinition(
        "first_journal", "Thoughtful Writer", "Wrote your first journal entry",
        "Write 1 journal entry", "🧠", *_count_badge("journal_entries", 1),
    ),
    BadgeDefinition(
        "journal_enthusiast", "Journaling Enthusiast", "Wrote 10 journal entries",
        "Write 10 journal entries", "⭐", *_count_badge("journal_entries", 10),
    ),
    BadgeDefinition(
        "chat_starter", "Conversation Starter", "Sent 25 messages to MindMate",
        "Send 25 chat messages", "💬", *_count_badge("chat_messages", 25),
    ),
    BadgeDefinition(
        "wellness_warrior", "Wellness Warrior", "Used all MindMate features",
        "Use mood tracking, journaling, and chat", "🏆",
        _wellness_warrior, _wellness_warrior_progress,
    ),
    BadgeDefinition(
        "positive_vibes", "Positive Vibes", "Maintained an average mood of 4+ for a week",
        "Average mood 4+ across your last 7 entries", "🌈",
        _positive_vibes, _positive_vibes_progress,
    ),
)

BADGES_BY_TYPE: Mapping[str, BadgeDefinition] = MappingProxyType({b.badge_type: b for b in BADGE_DEFINITIONS})
