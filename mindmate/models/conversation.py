"""Conversation models"""
from enum import Enum
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class EmotionCategory(str, Enum):
    """Emotional/intent label assigned to exactly one user message"""
    CRISIS = "crisis"
    WEBSITE_HELP = "website_help"
    SPECIFIC_FEATURE = "specific_feature"
    COPING_STRATEGIES = "coping_strategies"
    SITUATIONAL_HELP = "situational_help"
    SEEKING_HELP = "seeking_help"
    DEPRESSION = "depression"
    ANXIETY = "anxiety"
    ANGER = "anger"
    POSITIVE = "positive"
    NEUTRAL = "neutral"


class ResponseIntent(str, Enum):
    """Cross-cutting intents answered outside the category pools"""
    GREETING = "greeting"
    GRATITUDE = "gratitude"


class ChatSession(BaseModel):
    """Ordered group of messages for one user"""
    id: str
    user_id: str
    session_name: str
    created_at: datetime


class Message(BaseModel):
    """A single chat message; immutable once created"""
    model_config = ConfigDict(frozen=True)

    id: str
    session_id: str
    user_id: str
    text: str
    is_bot: bool
    created_at: datetime
    detected_category: Optional[EmotionCategory] = None

    @model_validator(mode="after")
    def _bot_messages_are_untagged(self) -> "Message":
        if self.is_bot and self.detected_category is not None:
            raise ValueError("bot messages cannot carry a detected category")
        return self

    @property
    def role(self) -> str:
        return "bot" if self.is_bot else "user"


class BotReply(BaseModel):
    """Output of the response generator"""
    category: Optional[EmotionCategory] = None
    intent: Optional[ResponseIntent] = None
    primary_response: str
    follow_up_response: Optional[str] = None


class ConversationTurn(BaseModel):
    """Result of one orchestrated exchange, returned to the presentation layer"""
    session_id: str
    category: Optional[EmotionCategory] = None  # None for a synthesized greeting
    primary_response: str
    follow_up_response: Optional[str] = None
    user_message_id: Optional[str] = None
    bot_message_id: Optional[str] = None
    persistence_errors: list[str] = Field(default_factory=list)

    @property
    def fully_persisted(self) -> bool:
        return not self.persistence_errors
