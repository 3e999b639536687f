"""Shared test fixtures for pnch.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import pytest

from pnch.clock import Date, FixedClock, Time
from pnch.ledger import Ledger
from pnch.storage import MemoryStorage


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "pnch"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def today() -> Date:
    return Date(2024, 3, 15)


@pytest.fixture()
def clock(today: Date) -> FixedClock:
    """Clock frozen at 2024-03-15 09:00."""
    return FixedClock(today, Time(9, 0))


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def ledger(storage: MemoryStorage, clock: FixedClock) -> Ledger:
    """An empty ledger backed by in-memory storage."""
    return Ledger.load(storage, clock)
