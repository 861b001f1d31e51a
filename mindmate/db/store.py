"""
Persistence collaborator used by the conversation and achievement cores

WellnessStore is the contract; PostgresWellnessStore is the production
implementation on top of mindmate.db.queries. Implementations raise
DatabaseError subclasses and nothing else.
"""

import logging
from abc import ABC, abstractmethod
from functools import wraps
from typing import Optional

import psycopg

from mindmate.db import queries
from mindmate.exceptions import DatabaseError, wrap_database_exception
from mindmate.models.badge import EarnedBadge
from mindmate.models.conversation import ChatSession, EmotionCategory, Message

logger = logging.getLogger(__name__)


class WellnessStore(ABC):
    """Abstract record store keyed by user identity"""

    # Chat sessions

    @abstractmethod
    async def create_session(self, user_id: str, session_name: str) -> ChatSession:
        ...

    @abstractmethod
    async def list_sessions(self, user_id: str) -> list[ChatSession]:
        """Newest first"""

    @abstractmethod
    async def get_latest_session(self, user_id: str) -> Optional[ChatSession]:
        ...

    # Messages

    @abstractmethod
    async def create_message(
        self,
        session_id: str,
        user_id: str,
        text: str,
        is_bot: bool,
        detected_category: Optional[EmotionCategory] = None
    ) -> str:
        """Returns the new message id"""

    @abstractmethod
    async def set_message_category(self, message_id: str, category: EmotionCategory) -> None:
        """Tag an untagged user message; bot messages are never tagged"""

    @abstractmethod
    async def list_messages(self, session_id: str) -> list[Message]:
        """Chronological order"""

    # Activity aggregates

    @abstractmethod
    async def count_mood_entries(self, user_id: str) -> int:
        ...

    @abstractmethod
    async def count_journal_entries(self, user_id: str) -> int:
        ...

    @abstractmethod
    async def count_user_chat_messages(self, user_id: str) -> int:
        ...

    @abstractmethod
    async def recent_mood_levels(self, user_id: str, limit: int) -> list[int]:
        """Most recent non-null levels, newest first"""

    # Badges

    @abstractmethod
    async def has_badge(self, user_id: str, badge_type: str) -> bool:
        ...

    @abstractmethod
    async def create_badge(
        self,
        user_id: str,
        badge_type: str,
        name: str,
        description: str
    ) -> Optional[EarnedBadge]:
        """Conflict-tolerant insert; None when (user, badge type) already exists"""

    @abstractmethod
    async def list_badges(self, user_id: str) -> list[EarnedBadge]:
        ...


def _wrap_errors(operation: str):
    """Translate driver exceptions into the DatabaseError hierarchy"""
    def decorator(func):
        @wraps(func)
        async def wrapper(self, *args, **kwargs):
            try:
                return await func(self, *args, **kwargs)
            except DatabaseError:
                raise
            except psycopg.Error as e:
                raise wrap_database_exception(
                    e,
                    operation=operation,
                    context={"args": [str(a) for a in args]}
                ) from e
        return wrapper
    return decorator


def _session_from_row(row: dict) -> ChatSession:
    return ChatSession(
        id=str(row['id']),
        user_id=str(row['user_id']),
        session_name=row['session_name'],
        created_at=row['created_at'],
    )


def _parse_category(value: Optional[str]) -> Optional[EmotionCategory]:
    try:
        return EmotionCategory(value) if value else None
    except ValueError:
        # Legacy rows may carry labels from older classifier versions
        logger.debug(f"Ignoring unknown emotion label: {value}")
        return None


def _message_from_row(row: dict) -> Message:
    return Message(
        id=str(row['id']),
        session_id=str(row['session_id']),
        user_id=str(row['user_id']),
        text=row['message'],
        is_bot=row['is_bot'],
        created_at=row['created_at'],
        detected_category=None if row['is_bot'] else _parse_category(row.get('emotion_detected')),
    )


def _badge_from_row(row: dict) -> EarnedBadge:
    return EarnedBadge(
        id=str(row['id']),
        user_id=str(row['user_id']),
        badge_type=row['badge_type'],
        badge_name=row['badge_name'],
        badge_description=row.get('badge_description'),
        earned_at=row['earned_at'],
    )


class PostgresWellnessStore(WellnessStore):
    """WellnessStore backed by PostgreSQL through the shared connection pool"""

    @_wrap_errors("create_session")
    async def create_session(self, user_id: str, session_name: str) -> ChatSession:
        row = await queries.create_chat_session(user_id, session_name)
        return _session_from_row(row)

    @_wrap_errors("list_sessions")
    async def list_sessions(self, user_id: str) -> list[ChatSession]:
        rows = await queries.get_chat_sessions(user_id)
        return [_session_from_row(row) for row in rows]

    @_wrap_errors("get_latest_session")
    async def get_latest_session(self, user_id: str) -> Optional[ChatSession]:
        row = await queries.get_latest_chat_session(user_id)
        return _session_from_row(row) if row else None

    @_wrap_errors("create_message")
    async def create_message(
        self,
        session_id: str,
        user_id: str,
        text: str,
        is_bot: bool,
        detected_category: Optional[EmotionCategory] = None
    ) -> str:
        if is_bot:
            detected_category = None
        row = await queries.save_chat_message(
            session_id,
            user_id,
            text,
            is_bot,
            detected_category.value if detected_category else None
        )
        return str(row['id'])

    @_wrap_errors("set_message_category")
    async def set_message_category(self, message_id: str, category: EmotionCategory) -> None:
        tagged = await queries.set_message_emotion(message_id, category.value)
        if not tagged:
            logger.warning(f"Message {message_id} was not tagged (missing, bot-authored or already tagged)")

    @_wrap_errors("list_messages")
    async def list_messages(self, session_id: str) -> list[Message]:
        rows = await queries.get_session_messages(session_id)
        return [_message_from_row(row) for row in rows]

    @_wrap_errors("count_mood_entries")
    async def count_mood_entries(self, user_id: str) -> int:
        return await queries.count_mood_entries(user_id)

    @_wrap_errors("count_journal_entries")
    async def count_journal_entries(self, user_id: str) -> int:
        return await queries.count_journal_entries(user_id)

    @_wrap_errors("count_user_chat_messages")
    async def count_user_chat_messages(self, user_id: str) -> int:
        return await queries.count_user_chat_messages(user_id)

    @_wrap_errors("recent_mood_levels")
    async def recent_mood_levels(self, user_id: str, limit: int) -> list[int]:
        return await queries.get_recent_mood_levels(user_id, limit)

    @_wrap_errors("has_badge")
    async def has_badge(self, user_id: str, badge_type: str) -> bool:
        return await queries.has_badge(user_id, badge_type)

    @_wrap_errors("create_badge")
    async def create_badge(
        self,
        user_id: str,
        badge_type: str,
        name: str,
        description: str
    ) -> Optional[EarnedBadge]:
        row = await queries.create_badge(user_id, badge_type, name, description)
        return _badge_from_row(row) if row else None

    @_wrap_errors("list_badges")
    async def list_badges(self, user_id: str) -> list[EarnedBadge]:
        rows = await queries.get_user_badges(user_id)
        return [_badge_from_row(row) for row in rows]
