"""
Conversation orchestrator

Sequences crisis detection, classification and response generation for each
inbound message and coordinates persistence of the exchange.

Per session the flow is:
    idle -> awaiting_user_input -> classifying -> responding_primary
         -> responding_follow_up (optional) -> awaiting_user_input

Persistence failures never block the conversation: they are logged, counted
and reported on the returned ConversationTurn while the reply itself is still
delivered.
"""

import logging
import random
from datetime import datetime, timezone
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Tuple
from uuid import uuid4

from mindmate.config import FOLLOW_UP_DELAY_SECONDS
from mindmate.conversation.classifier import classify_message
from mindmate.conversation.follow_up import FollowUpScheduler
from mindmate.conversation.patterns import normalize_text
from mindmate.conversation.responses import generate_response
from mindmate.db.store import WellnessStore
from mindmate.exceptions import DatabaseError
from mindmate.models.conversation import ChatSession, ConversationTurn, Message
from mindmate.observability import metrics
from mindmate.validators import validate_identifier

logger = logging.getLogger(__name__)

BotMessageCallback = Callable[[Message], Awaitable[None]]


class SessionState(str, Enum):
    """Where a chat session is in the request/response cycle"""
    IDLE = "idle"
    AWAITING_USER_INPUT = "awaiting_user_input"
    CLASSIFYING = "classifying"
    RESPONDING_PRIMARY = "responding_primary"
    RESPONDING_FOLLOW_UP = "responding_follow_up"


class ConversationOrchestrator:
    """
    Drives chat sessions for the presentation layer.

    Args:
        store: Persistence collaborator
        follow_up_delay: Seconds between the primary reply and its follow-up
        rng: Random source for response selection
        on_bot_message: Optional coroutine called with every bot message as
            it is emitted (primary replies, follow-ups, greetings)
    """

    def __init__(
        self,
        store: WellnessStore,
        follow_up_delay: float = FOLLOW_UP_DELAY_SECONDS,
        rng: Optional[random.Random] = None,
        on_bot_message: Optional[BotMessageCallback] = None
    ):
        self.store = store
        self.follow_up_delay = follow_up_delay
        self.rng = rng
        self.on_bot_message = on_bot_message
        self.scheduler = FollowUpScheduler()
        self._states: Dict[str, SessionState] = {}
        # Follow-ups scheduled but not yet delivered, per session
        self._outstanding: Dict[str, int] = {}

    def state(self, session_id: str) -> SessionState:
        return self._states.get(session_id, SessionState.IDLE)

    def pending_follow_ups(self, session_id: str) -> int:
        return self.scheduler.pending(session_id)

    # ==========================================
    # Session lifecycle
    # ==========================================

    async def start_session(
        self,
        user_id: str,
        session_name: Optional[str] = None
    ) -> Tuple[ChatSession, ConversationTurn]:
        """
        Create a session and open it with a greeting

        Raises:
            DatabaseError: if the session itself cannot be created
        """
        validate_identifier(user_id, "user_id")
        name = session_name or f"Chat {datetime.now(timezone.utc):%Y-%m-%d}"
        session = await self.store.create_session(user_id, name)
        logger.info(f"Started chat session {session.id} for user {user_id}")
        turn = await self.greet(session.id, user_id)
        return session, turn

    async def resume_session(
        self,
        session_id: str,
        user_id: str
    ) -> Tuple[List[Message], Optional[ConversationTurn]]:
        """
        Load a session's history, greeting the user if it has none yet

        Returns:
            (messages, greeting turn or None)
        """
        messages = await self.store.list_messages(session_id)
        if messages:
            self._states[session_id] = SessionState.AWAITING_USER_INPUT
            return messages, None
        return messages, await self.greet(session_id, user_id)

    async def get_or_create_session(
        self,
        user_id: str
    ) -> Tuple[ChatSession, List[Message], Optional[ConversationTurn]]:
        """Open the user's latest session, or start one on first use"""
        session = await self.store.get_latest_session(user_id)
        if session is None:
            session, turn = await self.start_session(user_id)
            return session, [], turn

        messages, turn = await self.resume_session(session.id, user_id)
        return session, messages, turn

    async def end_session(self, session_id: str) -> None:
        """Tear a session down; pending follow-ups are dropped unsent"""
        await self.scheduler.cancel(session_id)
        self._states.pop(session_id, None)
        self._outstanding.pop(session_id, None)
        logger.debug(f"Ended chat session {session_id}")

    async def aclose(self) -> None:
        await self.scheduler.aclose()
        self._states.clear()
        self._outstanding.clear()

    # ==========================================
    # Message handling
    # ==========================================

    async def greet(self, session_id: str, user_id: str) -> ConversationTurn:
        """Synthesize the session-start greeting through the empty-input path"""
        reply = generate_response(classify_message(""), rng=self.rng)
        errors: List[str] = []

        self._states[session_id] = SessionState.RESPONDING_PRIMARY
        bot_message_id = await self._deliver(session_id, user_id, reply.primary_response, "greeting", errors)
        self._states[session_id] = self._settled_state(session_id)

        return ConversationTurn(
            session_id=session_id,
            primary_response=reply.primary_response,
            bot_message_id=bot_message_id,
            persistence_errors=errors,
        )

    async def classify_and_respond(self, session_id: str, user_id: str, text: str) -> ConversationTurn:
        """
        Handle one inbound user message

        Args:
            session_id: Chat session the message belongs to
            user_id: Author of the message
            text: Raw message text; empty input is the session-start trigger
                and produces a greeting without storing a user message

        Returns:
            ConversationTurn with the category, the primary reply and the
            follow-up (if any). The follow-up is delivered separately after
            follow_up_delay seconds unless the session ends first.

        Raises:
            ValidationError: if session_id or user_id is blank
        """
        validate_identifier(session_id, "session_id")
        validate_identifier(user_id, "user_id")

        if not normalize_text(text):
            return await self.greet(session_id, user_id)

        errors: List[str] = []

        # Stored untagged; the category is written back after classification
        user_message_id = await self._persist(
            errors,
            "create_message",
            lambda: self.store.create_message(session_id, user_id, text, False),
        )

        self._states[session_id] = SessionState.CLASSIFYING
        classification = classify_message(text)
        category = classification.category
        metrics.messages_classified_total.labels(category=category.value).inc()
        if classification.is_crisis:
            metrics.crisis_detections_total.inc()
            logger.warning(f"Crisis response triggered in session {session_id} for user {user_id}")

        if user_message_id is not None:
            await self._persist(
                errors,
                "set_message_category",
                lambda: self.store.set_message_category(user_message_id, category),
            )

        reply = generate_response(classification, rng=self.rng)

        self._states[session_id] = SessionState.RESPONDING_PRIMARY
        bot_message_id = await self._deliver(session_id, user_id, reply.primary_response, "primary", errors)

        if reply.follow_up_response:
            self._states[session_id] = SessionState.RESPONDING_FOLLOW_UP
            follow_up = reply.follow_up_response
            self._outstanding[session_id] = self._outstanding.get(session_id, 0) + 1
            self.scheduler.schedule(
                session_id,
                lambda: self._deliver_follow_up(session_id, user_id, follow_up),
                self.follow_up_delay,
            )
        else:
            self._states[session_id] = self._settled_state(session_id)

        return ConversationTurn(
            session_id=session_id,
            category=category,
            primary_response=reply.primary_response,
            follow_up_response=reply.follow_up_response,
            user_message_id=user_message_id,
            bot_message_id=bot_message_id,
            persistence_errors=errors,
        )

    async def _deliver_follow_up(self, session_id: str, user_id: str, text: str) -> None:
        errors: List[str] = []
        await self._deliver(session_id, user_id, text, "follow_up", errors)
        if errors:
            logger.warning(f"Follow-up for session {session_id} was emitted but not saved: {errors}")
        remaining = self._outstanding.get(session_id, 0) - 1
        if remaining > 0:
            self._outstanding[session_id] = remaining
            return
        self._outstanding.pop(session_id, None)
        if self._states.get(session_id) is SessionState.RESPONDING_FOLLOW_UP:
            self._states[session_id] = SessionState.AWAITING_USER_INPUT

    # ==========================================
    # Helpers
    # ==========================================

    def _settled_state(self, session_id: str) -> SessionState:
        """State after a reply: still following up while earlier follow-ups are undelivered"""
        if self._outstanding.get(session_id):
            return SessionState.RESPONDING_FOLLOW_UP
        return SessionState.AWAITING_USER_INPUT

    async def _persist(self, errors: List[str], operation: str, call: Callable[[], Awaitable]):
        """Run a store call; on DatabaseError record it and return None"""
        try:
            return await call()
        except DatabaseError as e:
            metrics.persistence_failures_total.labels(operation=operation).inc()
            errors.append(f"{operation}: {e.message}")
            logger.error(f"Persistence failure during {operation}: {e.message}")
            return None

    async def _deliver(
        self,
        session_id: str,
        user_id: str,
        text: str,
        kind: str,
        errors: List[str]
    ) -> Optional[str]:
        """Persist and emit one bot message; returns its id if it was saved"""
        message_id = await self._persist(
            errors,
            "create_message",
            lambda: self.store.create_message(session_id, user_id, text, True),
        )
        message = Message(
            id=message_id or f"unsaved-{uuid4()}",
            session_id=session_id,
            user_id=user_id,
            text=text,
            is_bot=True,
            created_at=datetime.now(timezone.utc),
        )
        metrics.bot_responses_total.labels(kind=kind).inc()
        await self._emit(message)
        return message_id

    async def _emit(self, message: Message) -> None:
        if self.on_bot_message is None:
            return
        try:
            await self.on_bot_message(message)
        except Exception as e:
            logger.error(f"Failed to emit bot message in session {message.session_id}: {e}", exc_info=True)
