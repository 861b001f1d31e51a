"""Service wiring for MindMate"""
from mindmate.services.container import ServiceContainer, get_container, init_container

__all__ = ["ServiceContainer", "get_container", "init_container"]
