"""Pydantic models shared across MindMate"""
from mindmate.models.conversation import (
    EmotionCategory,
    ResponseIntent,
    ChatSession,
    Message,
    BotReply,
    ConversationTurn,
)
from mindmate.models.badge import ActivitySnapshot, EarnedBadge

__all__ = [
    "EmotionCategory",
    "ResponseIntent",
    "ChatSession",
    "Message",
    "BotReply",
    "ConversationTurn",
    "ActivitySnapshot",
    "EarnedBadge",
]
