"""Global test fixtures and utilities for MindMate tests"""
import random
import pytest
from unittest.mock import AsyncMock, MagicMock

from mindmate.db.memory_store import InMemoryWellnessStore


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def mock_db_cursor():
    """Mock database cursor with standard query results"""
    cursor = AsyncMock()
    cursor.fetchone = AsyncMock(return_value=None)
    cursor.fetchall = AsyncMock(return_value=[])
    cursor.execute = AsyncMock()
    cursor.rowcount = 0
    return cursor


@pytest.fixture
def mock_db_connection(mock_db_cursor):
    """Mock pooled connection whose cursor() context yields mock_db_cursor"""
    conn = AsyncMock()
    conn.cursor = MagicMock()
    conn.cursor.return_value.__aenter__.return_value = mock_db_cursor
    conn.commit = AsyncMock()
    return conn


@pytest.fixture
def store():
    """Fresh in-memory store"""
    return InMemoryWellnessStore()


# ============================================================================
# User Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "user-123"


@pytest.fixture
def seeded_rng():
    """Deterministic random source for response selection"""
    return random.Random(42)
