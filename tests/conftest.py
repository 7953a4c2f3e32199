from datetime import datetime, timezone
from itertools import count

import pytest

from flashcore.cards import Card


@pytest.fixture
def now():
    """Fixed review time: 2024-06-15 12:00 UTC."""
    return datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_card():
    """Card factory with sequential ids; due since the epoch unless overridden."""
    ids = count(1)

    def _make(**overrides):
        overrides.setdefault("id", f"card-{next(ids)}")
        return Card(**overrides)

    return _make
