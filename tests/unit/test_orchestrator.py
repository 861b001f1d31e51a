"""Unit tests for the conversation orchestrator (mindmate/conversation/orchestrator.py)"""
import asyncio
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock

from mindmate.conversation.crisis import CRISIS_FOLLOW_UP, CRISIS_RESPONSE
from mindmate.conversation.orchestrator import ConversationOrchestrator, SessionState
from mindmate.conversation.responses import (
    ANXIETY_RESPONSES,
    COPING_STRATEGY_FOLLOW_UPS,
    GREETING_RESPONSES,
)
from mindmate.db.store import WellnessStore
from mindmate.exceptions import QueryError, ValidationError
from mindmate.models.conversation import ChatSession, EmotionCategory


async def _drain(orchestrator: ConversationOrchestrator, session_id: str) -> None:
    """Wait until every scheduled follow-up for a session has run"""
    while orchestrator.pending_follow_ups(session_id):
        await asyncio.sleep(0.01)


# ============================================================================
# Message handling
# ============================================================================

@pytest.mark.asyncio
async def test_anxious_message_end_to_end(store, test_user_id, seeded_rng):
    """Anxiety message: tagged user message, primary reply, then a coping follow-up"""
    emitted = []
    orchestrator = ConversationOrchestrator(
        store, follow_up_delay=0, rng=seeded_rng, on_bot_message=AsyncMock(side_effect=emitted.append)
    )
    session = await store.create_session(test_user_id, "Exam week")

    turn = await orchestrator.classify_and_respond(session.id, test_user_id, "I feel really anxious about my exam")

    assert turn.category == EmotionCategory.ANXIETY
    assert turn.primary_response in ANXIETY_RESPONSES
    assert turn.follow_up_response in COPING_STRATEGY_FOLLOW_UPS
    assert turn.fully_persisted

    await _drain(orchestrator, session.id)

    messages = await store.list_messages(session.id)
    assert [m.role for m in messages] == ["user", "bot", "bot"]
    assert messages[0].detected_category == EmotionCategory.ANXIETY
    assert messages[1].text == turn.primary_response
    assert messages[2].text == turn.follow_up_response
    assert all(m.detected_category is None for m in messages[1:])
    assert [m.text for m in emitted] == [turn.primary_response, turn.follow_up_response]
    assert orchestrator.state(session.id) == SessionState.AWAITING_USER_INPUT


@pytest.mark.asyncio
async def test_reply_without_follow_up_returns_to_awaiting_input(store, test_user_id):
    orchestrator = ConversationOrchestrator(store, follow_up_delay=0)
    session = await store.create_session(test_user_id, "Chat")

    turn = await orchestrator.classify_and_respond(session.id, test_user_id, "Today was a wonderful day")

    assert turn.category == EmotionCategory.POSITIVE
    assert turn.follow_up_response is None
    assert orchestrator.pending_follow_ups(session.id) == 0
    assert orchestrator.state(session.id) == SessionState.AWAITING_USER_INPUT


@pytest.mark.asyncio
async def test_crisis_message(store, test_user_id):
    orchestrator = ConversationOrchestrator(store, follow_up_delay=0)
    session = await store.create_session(test_user_id, "Chat")

    turn = await orchestrator.classify_and_respond(session.id, test_user_id, "hi, I want to end my life")
    await _drain(orchestrator, session.id)

    assert turn.category == EmotionCategory.CRISIS
    assert turn.primary_response == CRISIS_RESPONSE
    assert turn.follow_up_response == CRISIS_FOLLOW_UP
    messages = await store.list_messages(session.id)
    assert messages[0].detected_category == EmotionCategory.CRISIS
    assert messages[-1].text == CRISIS_FOLLOW_UP


@pytest.mark.asyncio
async def test_gratitude_persists_positive_category(store, test_user_id):
    orchestrator = ConversationOrchestrator(store, follow_up_delay=0)
    session = await store.create_session(test_user_id, "Chat")

    turn = await orchestrator.classify_and_respond(session.id, test_user_id, "thank you")

    assert turn.category == EmotionCategory.POSITIVE
    messages = await store.list_messages(session.id)
    assert messages[0].detected_category == EmotionCategory.POSITIVE


@pytest.mark.asyncio
async def test_empty_message_is_greeting_without_user_message(store, test_user_id):
    orchestrator = ConversationOrchestrator(store, follow_up_delay=0)
    session = await store.create_session(test_user_id, "Chat")

    turn = await orchestrator.classify_and_respond(session.id, test_user_id, "")

    assert turn.category is None
    assert turn.user_message_id is None
    assert turn.primary_response in GREETING_RESPONSES
    assert turn.follow_up_response is None
    messages = await store.list_messages(session.id)
    assert len(messages) == 1
    assert messages[0].is_bot
    assert messages[0].detected_category is None
    assert await store.count_user_chat_messages(test_user_id) == 0


# ============================================================================
# Persistence failures
# ============================================================================

def _failing_store() -> AsyncMock:
    store = AsyncMock(spec=WellnessStore)
    store.create_message.side_effect = QueryError("insert failed", operation="create_message")
    return store


@pytest.mark.asyncio
async def test_persistence_failure_does_not_block_reply(test_user_id):
    store = _failing_store()
    emitted = []
    orchestrator = ConversationOrchestrator(
        store, follow_up_delay=0, on_bot_message=AsyncMock(side_effect=emitted.append)
    )

    turn = await orchestrator.classify_and_respond("session-1", test_user_id, "I'm so frustrated")

    assert turn.category == EmotionCategory.ANGER
    assert turn.primary_response
    assert turn.user_message_id is None
    assert turn.bot_message_id is None
    assert not turn.fully_persisted
    assert len(turn.persistence_errors) == 2
    assert all(e.startswith("create_message") for e in turn.persistence_errors)
    store.set_message_category.assert_not_awaited()
    assert emitted[0].text == turn.primary_response
    assert emitted[0].id.startswith("unsaved-")

    await _drain(orchestrator, "session-1")
    assert len(emitted) == 2


@pytest.mark.asyncio
async def test_category_update_failure_is_reported(test_user_id):
    store = AsyncMock(spec=WellnessStore)
    store.create_message.return_value = "msg-1"
    store.set_message_category.side_effect = QueryError("update failed", operation="set_message_category")
    orchestrator = ConversationOrchestrator(store, follow_up_delay=0)

    turn = await orchestrator.classify_and_respond("session-1", test_user_id, "Today was a wonderful day")

    assert turn.user_message_id == "msg-1"
    assert turn.persistence_errors == ["set_message_category: update failed"]
    store.set_message_category.assert_awaited_once_with("msg-1", EmotionCategory.POSITIVE)


@pytest.mark.asyncio
async def test_emit_failure_is_logged(store, test_user_id, caplog):
    orchestrator = ConversationOrchestrator(
        store, follow_up_delay=0, on_bot_message=AsyncMock(side_effect=RuntimeError("socket closed"))
    )
    session = await store.create_session(test_user_id, "Chat")

    turn = await orchestrator.classify_and_respond(session.id, test_user_id, "Today was a wonderful day")

    assert turn.fully_persisted
    assert "Failed to emit bot message" in caplog.text


# ============================================================================
# Follow-up cancellation
# ============================================================================

@pytest.mark.asyncio
async def test_end_session_cancels_pending_follow_up(store, test_user_id):
    emitted = []
    orchestrator = ConversationOrchestrator(
        store, follow_up_delay=0.2, on_bot_message=AsyncMock(side_effect=emitted.append)
    )
    session = await store.create_session(test_user_id, "Chat")

    turn = await orchestrator.classify_and_respond(session.id, test_user_id, "I'm so worried")
    assert turn.follow_up_response is not None
    assert orchestrator.state(session.id) == SessionState.RESPONDING_FOLLOW_UP

    await orchestrator.end_session(session.id)
    await asyncio.sleep(0.3)

    messages = await store.list_messages(session.id)
    assert [m.role for m in messages] == ["user", "bot"]
    assert [m.text for m in emitted] == [turn.primary_response]
    assert orchestrator.state(session.id) == SessionState.IDLE


@pytest.mark.asyncio
async def test_state_stays_following_up_until_last_follow_up(store, test_user_id):
    """Two overlapping follow-ups: the first delivery must not reset the state"""
    states = []
    orchestrator = ConversationOrchestrator(store, follow_up_delay=0.05)

    async def record(message):
        states.append((message.text, orchestrator.state(message.session_id)))

    orchestrator.on_bot_message = record
    session = await store.create_session(test_user_id, "Chat")

    first = await orchestrator.classify_and_respond(session.id, test_user_id, "I feel really anxious")
    second = await orchestrator.classify_and_respond(session.id, test_user_id, "I'm so worried about tomorrow")
    assert first.follow_up_response is not None
    assert second.follow_up_response is not None
    assert orchestrator.state(session.id) == SessionState.RESPONDING_FOLLOW_UP

    await _drain(orchestrator, session.id)

    assert len(states) == 4
    assert states[3][1] == SessionState.RESPONDING_FOLLOW_UP
    assert orchestrator.state(session.id) == SessionState.AWAITING_USER_INPUT


@pytest.mark.asyncio
async def test_reply_without_follow_up_keeps_pending_follow_up_state(store, test_user_id):
    orchestrator = ConversationOrchestrator(store, follow_up_delay=0.05)
    session = await store.create_session(test_user_id, "Chat")

    await orchestrator.classify_and_respond(session.id, test_user_id, "I feel really anxious")
    turn = await orchestrator.classify_and_respond(session.id, test_user_id, "Today was a wonderful day")

    assert turn.follow_up_response is None
    assert orchestrator.state(session.id) == SessionState.RESPONDING_FOLLOW_UP

    await _drain(orchestrator, session.id)
    assert orchestrator.state(session.id) == SessionState.AWAITING_USER_INPUT


@pytest.mark.asyncio
@pytest.mark.parametrize("session_id, user_id", [("", "user-123"), ("session-1", "   ")])
async def test_blank_identifiers_are_rejected(session_id, user_id):
    store = AsyncMock(spec=WellnessStore)
    orchestrator = ConversationOrchestrator(store, follow_up_delay=0)

    with pytest.raises(ValidationError):
        await orchestrator.classify_and_respond(session_id, user_id, "I feel anxious")
    store.create_message.assert_not_awaited()
    assert orchestrator.state(session_id) == SessionState.IDLE


@pytest.mark.asyncio
async def test_start_session_rejects_blank_user_id():
    store = AsyncMock(spec=WellnessStore)
    orchestrator = ConversationOrchestrator(store, follow_up_delay=0)

    with pytest.raises(ValidationError):
        await orchestrator.start_session("")
    store.create_session.assert_not_awaited()


# ============================================================================
# Session lifecycle
# ============================================================================

@pytest.mark.asyncio
async def test_start_session_greets(store, test_user_id):
    orchestrator = ConversationOrchestrator(store, follow_up_delay=0)

    session, turn = await orchestrator.start_session(test_user_id)

    assert session.session_name.startswith("Chat ")
    assert turn.category is None
    assert turn.primary_response in GREETING_RESPONSES
    messages = await store.list_messages(session.id)
    assert len(messages) == 1 and messages[0].is_bot
    assert orchestrator.state(session.id) == SessionState.AWAITING_USER_INPUT


@pytest.mark.asyncio
async def test_resume_session_with_history_does_not_greet(store, test_user_id):
    orchestrator = ConversationOrchestrator(store, follow_up_delay=0)
    session, _ = await orchestrator.start_session(test_user_id, "Evening check-in")

    messages, turn = await orchestrator.resume_session(session.id, test_user_id)

    assert turn is None
    assert len(messages) == 1


@pytest.mark.asyncio
async def test_resume_empty_session_greets(test_user_id):
    store = AsyncMock(spec=WellnessStore)
    store.list_messages.return_value = []
    store.create_message.return_value = "greeting-1"
    orchestrator = ConversationOrchestrator(store, follow_up_delay=0)

    messages, turn = await orchestrator.resume_session("session-1", test_user_id)

    assert messages == []
    assert turn.bot_message_id == "greeting-1"
    store.create_message.assert_awaited_once()
    assert store.create_message.await_args.args[3] is True


@pytest.mark.asyncio
async def test_get_or_create_session_reuses_latest(test_user_id):
    store = AsyncMock(spec=WellnessStore)
    existing = ChatSession(
        id="session-9", user_id=test_user_id, session_name="Chat", created_at=datetime.now(timezone.utc)
    )
    store.get_latest_session.return_value = existing
    store.list_messages.return_value = ["placeholder"]
    orchestrator = ConversationOrchestrator(store, follow_up_delay=0)

    session, messages, turn = await orchestrator.get_or_create_session(test_user_id)

    assert session is existing
    assert turn is None
    store.create_session.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_or_create_session_creates_on_first_use(store, test_user_id):
    orchestrator = ConversationOrchestrator(store, follow_up_delay=0)

    session, messages, turn = await orchestrator.get_or_create_session(test_user_id)

    assert messages == []
    assert turn is not None
    assert (await store.get_latest_session(test_user_id)).id == session.id
