"""
In-memory WellnessStore

Nothing is persisted across process restarts. Used for local development,
demos and tests; production wiring uses PostgresWellnessStore.
"""

import logging
from datetime import datetime, timezone
from itertools import count
from typing import Dict, List, Optional, Tuple
from uuid import uuid4

from mindmate.db.store import WellnessStore
from mindmate.exceptions import RecordNotFoundError
from mindmate.models.badge import EarnedBadge
from mindmate.models.conversation import ChatSession, EmotionCategory, Message

logger = logging.getLogger(__name__)


class InMemoryWellnessStore(WellnessStore):
    """Dictionary-backed store; one instance per process or test"""

    def __init__(self):
        self._sessions: Dict[str, ChatSession] = {}
        self._messages: Dict[str, Message] = {}
        self._mood_entries: Dict[str, List[Optional[int]]] = {}
        self._journal_entries: Dict[str, List[dict]] = {}
        self._badges: Dict[Tuple[str, str], EarnedBadge] = {}
        # Monotonic sequence keeps ordering stable when timestamps collide
        self._sequence = count()
        self._order: Dict[str, int] = {}
        logger.debug("InMemoryWellnessStore initialized - records are NOT persisted")

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    # ==========================================
    # Chat sessions
    # ==========================================

    async def create_session(self, user_id: str, session_name: str) -> ChatSession:
        session = ChatSession(
            id=str(uuid4()),
            user_id=user_id,
            session_name=session_name,
            created_at=self._now(),
        )
        self._sessions[session.id] = session
        self._order[session.id] = next(self._sequence)
        return session

    async def list_sessions(self, user_id: str) -> list[ChatSession]:
        sessions = [s for s in self._sessions.values() if s.user_id == user_id]
        return sorted(sessions, key=lambda s: self._order[s.id], reverse=True)

    async def get_latest_session(self, user_id: str) -> Optional[ChatSession]:
        sessions = await self.list_sessions(user_id)
        return sessions[0] if sessions else None

    # ==========================================
    # Messages
    # ==========================================

    async def create_message(
        self,
        session_id: str,
        user_id: str,
        text: str,
        is_bot: bool,
        detected_category: Optional[EmotionCategory] = None
    ) -> str:
        if session_id not in self._sessions:
            raise RecordNotFoundError(
                f"Chat session {session_id} does not exist",
                record_type="Chat session",
                record_id=session_id,
                operation="create_message",
            )
        message = Message(
            id=str(uuid4()),
            session_id=session_id,
            user_id=user_id,
            text=text,
            is_bot=is_bot,
            created_at=self._now(),
            detected_category=None if is_bot else detected_category,
        )
        self._messages[message.id] = message
        self._order[message.id] = next(self._sequence)
        return message.id

    async def set_message_category(self, message_id: str, category: EmotionCategory) -> None:
        message = self._messages.get(message_id)
        if message is None or message.is_bot or message.detected_category is not None:
            logger.warning(f"Message {message_id} was not tagged (missing, bot-authored or already tagged)")
            return
        self._messages[message_id] = message.model_copy(update={"detected_category": category})

    async def list_messages(self, session_id: str) -> list[Message]:
        messages = [m for m in self._messages.values() if m.session_id == session_id]
        return sorted(messages, key=lambda m: self._order[m.id])

    # ==========================================
    # Mood & journal (write side used by tests and demos)
    # ==========================================

    async def add_mood_entry(self, user_id: str, mood_level: Optional[int]) -> None:
        self._mood_entries.setdefault(user_id, []).append(mood_level)

    async def add_journal_entry(self, user_id: str, title: str, content: str = "") -> None:
        self._journal_entries.setdefault(user_id, []).append(
            {"title": title, "content": content, "created_at": self._now()}
        )

    # ==========================================
    # Activity aggregates
    # ==========================================

    async def count_mood_entries(self, user_id: str) -> int:
        return len(self._mood_entries.get(user_id, []))

    async def count_journal_entries(self, user_id: str) -> int:
        return len(self._journal_entries.get(user_id, []))

    async def count_user_chat_messages(self, user_id: str) -> int:
        return sum(1 for m in self._messages.values() if m.user_id == user_id and not m.is_bot)

    async def recent_mood_levels(self, user_id: str, limit: int) -> list[int]:
        levels = [level for level in reversed(self._mood_entries.get(user_id, [])) if level is not None]
        return levels[:limit]

    # ==========================================
    # Badges
    # ==========================================

    async def has_badge(self, user_id: str, badge_type: str) -> bool:
        return (user_id, badge_type) in self._badges

    async def create_badge(
        self,
        user_id: str,
        badge_type: str,
        name: str,
        description: str
    ) -> Optional[EarnedBadge]:
        key = (user_id, badge_type)
        if key in self._badges:
            return None
        badge = EarnedBadge(
            id=str(uuid4()),
            user_id=user_id,
            badge_type=badge_type,
            badge_name=name,
            badge_description=description,
            earned_at=self._now(),
        )
        # No await between the check and the insert, so this is atomic on the event loop
        self._badges[key] = badge
        self._order[badge.id] = next(self._sequence)
        return badge

    async def list_badges(self, user_id: str) -> list[EarnedBadge]:
        badges = [b for (uid, _), b in self._badges.items() if uid == user_id]
        return sorted(badges, key=lambda b: self._order[b.id], reverse=True)
