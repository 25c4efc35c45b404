# tests/conftest.py
"""Shared test doubles for the parking board."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import AsyncMock

import pytest

from app.services.spot_registry import default_spots
from app.services.spot_store import SpotStore


class FakeIdentity:
    """Stands in for IdentityStore without touching the database."""

    def __init__(self, stored=None):
        self.stored = stored
        self.name = None

    def load(self):
        self.name = self.stored
        return self.name

    def save(self, name):
        trimmed = (name or "").strip()
        if not trimmed:
            return None
        self.stored = self.name = trimmed
        return trimmed


class FakeRemoteStore(SpotStore):
    """Remote-mode store whose snapshots and errors are pushed by the test."""

    remote = True

    def __init__(self):
        self.ensure_spots = AsyncMock()
        self.claim = AsyncMock()
        self.release = AsyncMock()
        self.on_snapshot = None
        self.on_error = None
        self.unsubscribe_calls = 0

    async def ensure_spots(self):  # replaced per instance
        pass

    async def claim(self, spot_id, name):  # replaced per instance
        pass

    async def release(self, spot_id, name):  # replaced per instance
        pass

    def subscribe(self, on_snapshot, on_error):
        self.on_snapshot = on_snapshot
        self.on_error = on_error

        def unsubscribe():
            self.unsubscribe_calls += 1

        return unsubscribe

    def push(self, **occupants):
        """Deliver a snapshot, e.g. push(**{"garage-1": "Jack"})."""
        spots = [
            spot.with_occupant(occupants[spot.id], None) if spot.id in occupants else spot
            for spot in default_spots()
        ]
        self.on_snapshot(spots)


@pytest.fixture
def identity():
    return FakeIdentity(stored="Aswin")


@pytest.fixture
def remote_store():
    return FakeRemoteStore()


@pytest.fixture
def anonymous():
    """A device that has never saved a name."""
    return FakeIdentity()
