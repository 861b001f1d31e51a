"""Earned badge queries"""
import logging
from typing import Optional
from mindmate.db.connection import db

logger = logging.getLogger(__name__)


async def has_badge(user_id: str, badge_type: str) -> bool:
    """Check whether a user already earned a badge type"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "SELECT 1 FROM user_badges WHERE user_id = %s AND badge_type = %s",
                (user_id, badge_type)
            )
            row = await cur.fetchone()
            return row is not None


async def create_badge(
    user_id: str,
    badge_type: str,
    badge_name: str,
    badge_description: Optional[str] = None
) -> Optional[dict]:
    """
    Grant a badge to a user

    Relies on the UNIQUE (user_id, badge_type) constraint: concurrent callers
    race on the insert and exactly one of them gets a row back.

    Returns:
        The new row, or None if the badge already existed
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO user_badges (user_id, badge_type, badge_name, badge_description)
                VALUES (%s, %s, %s, %s)
                ON CONFLICT (user_id, badge_type) DO NOTHING
                RETURNING id, user_id, badge_type, badge_name, badge_description, earned_at
                """,
                (user_id, badge_type, badge_name, badge_description)
            )
            row = await cur.fetchone()
            await conn.commit()

    if row is None:
        logger.debug(f"Badge {badge_type} already granted to user {user_id}")
        return None
    return dict(row)


async def get_user_badges(user_id: str) -> list[dict]:
    """Get a user's earned badges, most recent first"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT id, user_id, badge_type, badge_name, badge_description, earned_at
                FROM user_badges
                WHERE user_id = %s
                ORDER BY earned_at DESC
                """,
                (user_id,)
            )
            rows = await cur.fetchall()
            return [dict(row) for row in rows]
