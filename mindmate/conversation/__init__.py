"""
Conversation core for MindMate

Rule-based emotion classification, crisis detection, templated responses and
the orchestrator that ties them to persistence.
"""

from mindmate.conversation.classifier import Classification, classify_message, detect_emotion
from mindmate.conversation.crisis import detect_crisis
from mindmate.conversation.orchestrator import ConversationOrchestrator, SessionState
from mindmate.conversation.responses import generate_response, respond_to

__all__ = [
    "Classification",
    "classify_message",
    "detect_emotion",
    "detect_crisis",
    "ConversationOrchestrator",
    "SessionState",
    "generate_response",
    "respond_to",
]
