"""
Database queries - re-exported for convenience.

Module organization:
- conversation.py: Chat sessions and messages
- wellness.py: Mood and journal aggregates used by achievements
- badges.py: Earned badges
"""

from mindmate.db.queries.conversation import (
    create_chat_session,
    get_chat_sessions,
    get_latest_chat_session,
    save_chat_message,
    set_message_emotion,
    get_session_messages,
    count_user_chat_messages,
)

from mindmate.db.queries.wellness import (
    count_mood_entries,
    count_journal_entries,
    get_recent_mood_levels,
)

from mindmate.db.queries.badges import (
    has_badge,
    create_badge,
    get_user_badges,
)

__all__ = [
    "create_chat_session",
    "get_chat_sessions",
    "get_latest_chat_session",
    "save_chat_message",
    "set_message_emotion",
    "get_session_messages",
    "count_user_chat_messages",
    "count_mood_entries",
    "count_journal_entries",
    "get_recent_mood_levels",
    "has_badge",
    "create_badge",
    "get_user_badges",
]
