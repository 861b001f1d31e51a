"""Badge and activity models for gamification"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ActivitySnapshot(BaseModel):
    """Aggregate activity computed fresh for every evaluation; never stored"""
    user_id: str
    mood_entries: int = 0
    journal_entries: int = 0
    chat_messages: int = 0  # user-authored only
    recent_mood_levels: list[int] = Field(default_factory=list)  # most recent first
    recent_mood_average: Optional[float] = None  # set only for a full window


class EarnedBadge(BaseModel):
    """A user's unique (user, badge type) achievement record"""
    id: str
    user_id: str
    badge_type: str
    badge_name: str
    badge_description: Optional[str] = None
    earned_at: datetime
