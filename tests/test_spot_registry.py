# tests/test_spot_registry.py
"""Unit tests for the static spot registry."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from app.services.spot_registry import (
    ROOMMATES, SPOT_BLUEPRINT, SPOT_IDS, Location, default_spots, get_blueprint, is_known_spot,
)


class TestSpotRegistry:
    def test_four_spots_in_board_order(self):
        assert SPOT_IDS == ("garage-1", "garage-2", "driveway-1", "driveway-2")
        assert [s.label for s in SPOT_BLUEPRINT] == ["Garage 1", "Garage 2", "Driveway 1", "Driveway 2"]

    def test_locations(self):
        assert get_blueprint("garage-2").location == Location.GARAGE
        assert get_blueprint("driveway-1").location == Location.DRIVEWAY

    def test_unknown_spot(self):
        assert not is_known_spot("street-1")
        with pytest.raises(KeyError):
            get_blueprint("street-1")

    def test_default_spots_are_empty(self):
        spots = default_spots()
        assert [s.id for s in spots] == list(SPOT_IDS)
        assert all(s.occupant is None and s.updated_at is None for s in spots)

    def test_roommates(self):
        assert ROOMMATES == ("Aswin", "Jack", "Joel", "Nishant")
