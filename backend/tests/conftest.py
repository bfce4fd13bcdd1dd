"""Pytest configuration and shared fixtures for backend tests."""

import os
import sys
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add parent directory to path for guessr module discovery
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment BEFORE importing guessr modules
os.environ.setdefault("ENVIRONMENT", "test")

from guessr.models.map import Map
from guessr.models.user import User


NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def scalar_result(value):
    """Mimic ``Result.scalar_one_or_none()`` returning ``value``."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def make_db(*rows):
    """Mock session whose successive ``execute`` calls return ``rows``."""
    db = AsyncMock()
    db.execute = AsyncMock(side_effect=[scalar_result(row) for row in rows])
    return db


@pytest.fixture
def now():
    """Fixed reference time for elapsed-time formatting."""
    return NOW


@pytest.fixture
def author():
    """Map author."""
    return User(id=1, username="alice", created_at=NOW - timedelta(days=400))


@pytest.fixture
def paris_map(author):
    """Three-location map created 90 seconds before ``now``."""
    return Map(
        id=10,
        slug="paris-streets",
        name="Paris Streets",
        description_short="Boulevards and bridges.",
        description_long="A tour of Paris.\nMind the cafés.",
        data=[
            {"lat": 48.8584, "lng": 2.2945},
            {"lat": 48.8606, "lng": 2.3376},
            {"lat": 48.8867, "lng": 2.3431},
        ],
        plays=12840,
        hearts=312,
        created_by=author.id,
        created_at=NOW - timedelta(milliseconds=90000),
    )


@pytest.fixture
def lighthouse_map(author):
    """Single-location map."""
    return Map(
        id=11,
        slug="lonely-lighthouse",
        name="Lonely Lighthouse",
        description_short="One location.",
        description_long="Same place every round.",
        data=[{"lat": 58.2167, "lng": -6.3885}],
        plays=97,
        hearts=4,
        created_by=author.id,
        created_at=NOW - timedelta(days=3, hours=5),
    )


@pytest.fixture
def empty_map(author):
    """Map without locations."""
    return Map(
        id=12,
        slug="coming-soon",
        name="Coming Soon",
        description_short="Nothing yet.",
        description_long="",
        data=[],
        plays=0,
        hearts=0,
        created_by=author.id,
        created_at=NOW - timedelta(hours=2),
    )


@pytest.fixture
def orphan_map():
    """Map whose author row does not exist."""
    return Map(
        id=13,
        slug="orphaned",
        name="Orphaned",
        description_short="",
        description_long="",
        data=[{"lat": 0.0, "lng": 0.0}],
        plays=1,
        hearts=0,
        created_by=404,
        created_at=NOW - timedelta(days=1),
    )


# Configure pytest-asyncio
pytest_plugins = ["pytest_asyncio"]
