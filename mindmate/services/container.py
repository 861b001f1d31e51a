"""
Service Container - Dependency Injection Container

Holds the persistence collaborator and hands out the conversation and
achievement services built on top of it. Services are created lazily on
first access.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging

from mindmate.db.store import WellnessStore
from mindmate.models.badge import EarnedBadge

logger = logging.getLogger(__name__)


class AchievementService:
    """Thin facade over the achievement evaluator bound to one store"""

    def __init__(self, store: WellnessStore):
        self.store = store

    async def evaluate(self, user_id: str) -> List[EarnedBadge]:
        from mindmate.gamification.achievement_system import evaluate_achievements
        return await evaluate_achievements(self.store, user_id)

    async def badges(self, user_id: str, include_locked: bool = False) -> Dict[str, Any]:
        from mindmate.gamification.achievement_system import get_user_badges
        return await get_user_badges(self.store, user_id, include_locked=include_locked)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Services are lazy-loaded on first access via properties.
    The store is injected.
    """

    # Infrastructure dependencies (injected)
    store: WellnessStore
    follow_up_delay: Optional[float] = None

    # Services (lazy-loaded via properties)
    _conversation: Optional[object] = field(default=None, init=False, repr=False)
    _achievements: Optional[AchievementService] = field(default=None, init=False, repr=False)

    @property
    def conversation(self):
        """Get ConversationOrchestrator instance (lazy-loaded)"""
        if self._conversation is None:
            from mindmate.conversation.orchestrator import ConversationOrchestrator
            if self.follow_up_delay is None:
                self._conversation = ConversationOrchestrator(self.store)
            else:
                self._conversation = ConversationOrchestrator(self.store, follow_up_delay=self.follow_up_delay)
            logger.debug("ConversationOrchestrator instantiated")
        return self._conversation

    @property
    def achievements(self) -> AchievementService:
        """Get AchievementService instance (lazy-loaded)"""
        if self._achievements is None:
            self._achievements = AchievementService(self.store)
            logger.debug("AchievementService instantiated")
        return self._achievements

    async def aclose(self) -> None:
        """Cancel anything the conversation service still has pending"""
        if self._conversation is not None:
            await self._conversation.aclose()


# Global container instance (initialized in main.py)
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """
    Get the global service container.

    Raises:
        RuntimeError: If container not initialized (call init_container first)
    """
    if _container is None:
        raise RuntimeError(
            "Service container not initialized. "
            "Call init_container() in main.py before using services."
        )
    return _container


def init_container(store: WellnessStore, follow_up_delay: Optional[float] = None) -> ServiceContainer:
    """
    Initialize the global service container.

    Should be called once in main.py after infrastructure setup.

    Args:
        store: Persistence collaborator shared by every service
        follow_up_delay: Override for the follow-up pause (seconds)
    """
    global _container

    _container = ServiceContainer(store=store, follow_up_delay=follow_up_delay)

    logger.info("Service container initialized")
    return _container


def reset_container() -> None:
    """Drop the global container (tests)"""
    global _container
    _container = None
