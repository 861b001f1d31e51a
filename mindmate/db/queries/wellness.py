"""Mood and journal aggregate queries"""
import logging
from mindmate.db.connection import db

logger = logging.getLogger(__name__)


async def count_mood_entries(user_id: str) -> int:
    """Count all mood entries for a user"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "SELECT COUNT(*) AS count FROM mood_entries WHERE user_id = %s",
                (user_id,)
            )
            row = await cur.fetchone()
            return row['count'] if row else 0


async def count_journal_entries(user_id: str) -> int:
    """Count all journal entries for a user"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "SELECT COUNT(*) AS count FROM journal_entries WHERE user_id = %s",
                (user_id,)
            )
            row = await cur.fetchone()
            return row['count'] if row else 0


async def get_recent_mood_levels(user_id: str, limit: int = 7) -> list[int]:
    """
    Get the most recent non-null mood levels, newest first

    Ordered by insertion time, not calendar day: several entries on one day
    each count separately.
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT mood_level
                FROM mood_entries
                WHERE user_id = %s AND mood_level IS NOT NULL
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (user_id, limit)
            )
            rows = await cur.fetchall()
            return [row['mood_level'] for row in rows]
