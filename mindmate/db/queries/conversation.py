"""Chat session and message queries"""
import logging
from typing import Optional
from mindmate.db.connection import db

logger = logging.getLogger(__name__)


async def create_chat_session(user_id: str, session_name: str) -> dict:
    """
    Create a chat session

    Returns:
        {'id', 'user_id', 'session_name', 'created_at'}
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO chat_sessions (user_id, session_name)
                VALUES (%s, %s)
                RETURNING id, user_id, session_name, created_at
                """,
                (user_id, session_name)
            )
            row = await cur.fetchone()
            await conn.commit()
    logger.info(f"Created chat session {row['id']} for user {user_id}")
    return dict(row)


async def get_chat_sessions(user_id: str, limit: int = 50) -> list[dict]:
    """Get a user's chat sessions, newest first"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT id, user_id, session_name, created_at
                FROM chat_sessions
                WHERE user_id = %s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (user_id, limit)
            )
            rows = await cur.fetchall()
            return [dict(row) for row in rows]


async def get_latest_chat_session(user_id: str) -> Optional[dict]:
    """Get the most recently created chat session, if any"""
    sessions = await get_chat_sessions(user_id, limit=1)
    return sessions[0] if sessions else None


async def save_chat_message(
    session_id: str,
    user_id: str,
    message: str,
    is_bot: bool,
    emotion_detected: Optional[str] = None
) -> dict:
    """
    Save a message to a chat session

    Args:
        session_id: Chat session UUID
        user_id: Owner of the session
        message: Message text
        is_bot: True for bot replies
        emotion_detected: Category label (user messages only)

    Returns:
        The stored row
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO chat_messages (session_id, user_id, message, is_bot, emotion_detected)
                VALUES (%s, %s, %s, %s, %s)
                RETURNING id, session_id, user_id, message, is_bot, emotion_detected, created_at
                """,
                (session_id, user_id, message, is_bot, emotion_detected)
            )
            row = await cur.fetchone()
            await conn.commit()
    logger.debug(f"Saved {'bot' if is_bot else 'user'} message for session {session_id}")
    return dict(row)


async def set_message_emotion(message_id: str, emotion_detected: str) -> bool:
    """
    Tag a user message with its detected category

    Only untagged user messages are updated, so a message is tagged once.

    Returns:
        True if the message was tagged
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                UPDATE chat_messages
                SET emotion_detected = %s
                WHERE id = %s AND is_bot = FALSE AND emotion_detected IS NULL
                """,
                (emotion_detected, message_id)
            )
            updated = cur.rowcount
            await conn.commit()
    return updated > 0


async def get_session_messages(session_id: str) -> list[dict]:
    """Get all messages of a session in chronological order"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT id, session_id, user_id, message, is_bot, emotion_detected, created_at
                FROM chat_messages
                WHERE session_id = %s
                ORDER BY created_at ASC, id ASC
                """,
                (session_id,)
            )
            rows = await cur.fetchall()
            return [dict(row) for row in rows]


async def count_user_chat_messages(user_id: str) -> int:
    """Count messages the user (not the bot) has sent across all sessions"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT COUNT(*) AS count
                FROM chat_messages
                WHERE user_id = %s AND is_bot = FALSE
                """,
                (user_id,)
            )
            row = await cur.fetchone()
            return row['count'] if row else 0
