"""
Achievement System

Evaluates a user's activity against the fixed badge table and grants every
newly qualified badge exactly once.

Features:
- Activity snapshot built fresh from the store on every run
- Idempotent granting (already-earned badges are a no-op)
- Race-safe creation: the store's conflict-tolerant insert decides the winner
- Progress tracking for locked badges
"""

import asyncio
import logging
import time
from typing import Any, Dict, List

from mindmate.db.store import WellnessStore
from mindmate.exceptions import DatabaseError
from mindmate.gamification.badges import (
    BADGE_DEFINITIONS,
    BADGES_BY_TYPE,
    POSITIVE_VIBES_WINDOW,
    recent_mood_average,
)
from mindmate.models.badge import ActivitySnapshot, EarnedBadge
from mindmate.observability import metrics
from mindmate.validators import validate_identifier

logger = logging.getLogger(__name__)


async def build_activity_snapshot(store: WellnessStore, user_id: str) -> ActivitySnapshot:
    """
    Collect the aggregates every badge predicate needs

    Raises:
        DatabaseError: if any aggregate cannot be read
    """
    mood_count, journal_count, chat_count, levels = await asyncio.gather(
        store.count_mood_entries(user_id),
        store.count_journal_entries(user_id),
        store.count_user_chat_messages(user_id),
        store.recent_mood_levels(user_id, POSITIVE_VIBES_WINDOW),
    )
    levels = [level for level in levels if level is not None]

    return ActivitySnapshot(
        user_id=user_id,
        mood_entries=mood_count,
        journal_entries=journal_count,
        chat_messages=chat_count,
        recent_mood_levels=levels,
        recent_mood_average=recent_mood_average(levels),
    )


async def evaluate_achievements(store: WellnessStore, user_id: str) -> List[EarnedBadge]:
    """
    Grant any badge the user newly qualifies for

    Args:
        store: Persistence collaborator
        user_id: User to evaluate

    Returns:
        Badges granted by this call only. Badges already held, and badges
        another concurrent run granted first, are not included.

    Raises:
        ValidationError: if user_id is blank
        DatabaseError: if the activity snapshot cannot be built. A failure
            while granting one badge is logged and the remaining badges are
            still evaluated; the next run retries it.
    """
    validate_identifier(user_id, "user_id")
    started = time.perf_counter()
    snapshot = await build_activity_snapshot(store, user_id)
    newly_granted: List[EarnedBadge] = []

    for badge in BADGE_DEFINITIONS:
        if not badge.predicate(snapshot):
            continue

        try:
            if await store.has_badge(user_id, badge.badge_type):
                continue

            earned = await store.create_badge(user_id, badge.badge_type, badge.name, badge.description)
        except DatabaseError as e:
            metrics.persistence_failures_total.labels(operation="create_badge").inc()
            logger.error(f"Could not grant {badge.badge_type} to user {user_id}: {e.message}")
            continue

        if earned is None:
            # Lost the insert race to another evaluator run
            logger.debug(f"Badge {badge.badge_type} for user {user_id} was granted concurrently")
            continue

        newly_granted.append(earned)
        metrics.badges_granted_total.labels(badge_type=badge.badge_type).inc()
        logger.info(f"User {user_id} earned badge: {badge.badge_type} ({badge.name})")

    metrics.achievement_evaluation_duration_seconds.observe(time.perf_counter() - started)
    return newly_granted


async def get_user_badges(
    store: WellnessStore,
    user_id: str,
    include_locked: bool = False
) -> Dict[str, Any]:
    """
    Get a user's badges with optional progress toward locked ones

    Returns:
        {
            'earned': [EarnedBadge, ...] (most recent first),
            'locked': [{'badge_type', 'name', 'description', 'requirement',
                        'icon', 'progress'}] (if include_locked=True),
            'total_earned': int,
            'total_badges': int
        }
    """
    earned = await store.list_badges(user_id)
    earned_types = {badge.badge_type for badge in earned}

    result: Dict[str, Any] = {
        'earned': earned,
        'total_earned': len(earned),
        'total_badges': len(BADGE_DEFINITIONS),
    }

    if include_locked:
        snapshot = await build_activity_snapshot(store, user_id)
        locked = []
        for badge in BADGE_DEFINITIONS:
            if badge.badge_type in earned_types:
                continue
            current, required = badge.progress(snapshot)
            locked.append({
                'badge_type': badge.badge_type,
                'name': badge.name,
                'description': badge.description,
                'requirement': badge.requirement,
                'icon': badge.icon,
                'progress': {
                    'current': current,
                    'required': required,
                    'percentage': min(100, int(current / required * 100)) if required else 0,
                    'description': f"{current}/{required}",
                },
            })

        # Closest to completion first
        locked.sort(key=lambda b: b['progress']['percentage'], reverse=True)
        result['locked'] = locked

    return result


def format_badge_display(badges_data: Dict[str, Any]) -> str:
    """
    Format a badge summary for display

    Args:
        badges_data: Output from get_user_badges()
    """
    earned = badges_data['earned']
    if not earned:
        return "🏆 No badges earned yet. Start using MindMate to unlock achievements! 💪"

    lines = [f"🏆 YOUR BADGES ({badges_data['total_earned']}/{badges_data['total_badges']})", ""]
    for badge in earned:
        definition = BADGES_BY_TYPE.get(badge.badge_type)
        icon = definition.icon if definition else "🏅"
        lines.append(f"{icon} {badge.badge_name} - {badge.badge_description or ''}".rstrip(" -"))

    if badges_data.get('locked'):
        lines.append("")
        lines.append("🔒 NEXT UP")
        for badge in badges_data['locked']:
            lines.append(f"{badge['icon']} {badge['name']} ({badge['progress']['description']})")

    return "\n".join(lines)


def format_badge_unlock_message(badge: EarnedBadge) -> str:
    """Celebration message for a newly granted badge"""
    definition = BADGES_BY_TYPE.get(badge.badge_type)
    icon = definition.icon if definition else "🏆"

    return f"""🎉 BADGE EARNED! 🎉

{icon} {badge.badge_name}

{badge.badge_description or ''}

Keep up the amazing work! 💪"""
