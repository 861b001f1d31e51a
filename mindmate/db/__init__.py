"""Persistence layer for MindMate"""
from mindmate.db.store import WellnessStore, PostgresWellnessStore
from mindmate.db.memory_store import InMemoryWellnessStore

__all__ = ["WellnessStore", "PostgresWellnessStore", "InMemoryWellnessStore"]
