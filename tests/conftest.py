"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for settings validation
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("TIMEZONE", "UTC")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from datetime import UTC, datetime
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def mock_session():
    """Mock AsyncSession for tests without a database."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.delete = MagicMock()
    session.refresh = AsyncMock()
    return session


@pytest.fixture
def monday_10am():
    """Monday 2026-10-19 10:00 UTC."""
    return datetime(2026, 10, 19, 10, 0, tzinfo=UTC)


@pytest.fixture
def make_withdrawal():
    """Factory for withdrawal history entries."""

    def _make(amount, status="pending", created_at=None):
        return SimpleNamespace(
            amount=Decimal(str(amount)),
            status=status,
            created_at=created_at or datetime(2026, 10, 19, 8, 0, tzinfo=UTC),
        )

    return _make
