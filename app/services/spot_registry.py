# app/services/spot_registry.py
"""
Static definition of the four parking spots and the roommates who share them.
Pure data: nothing here is ever mutated at runtime.
"""

from dataclasses import dataclass
from enum import Enum


class Location(str, Enum):
    GARAGE = "Garage"
    DRIVEWAY = "Driveway"


@dataclass(frozen=True)
class SpotBlueprint:
    id: str
    label: str
    location: Location


ROOMMATES = ("Aswin", "Jack", "Joel", "Nishant")

SPOT_BLUEPRINT = (
    SpotBlueprint("garage-1", "Garage 1", Location.GARAGE),
    SpotBlueprint("garage-2", "Garage 2", Location.GARAGE),
    SpotBlueprint("driveway-1", "Driveway 1", Location.DRIVEWAY),
    SpotBlueprint("driveway-2", "Driveway 2", Location.DRIVEWAY),
)

SPOT_IDS = tuple(spot.id for spot in SPOT_BLUEPRINT)

_BY_ID = {spot.id: spot for spot in SPOT_BLUEPRINT}


def is_known_spot(spot_id: str) -> bool:
    return spot_id in _BY_ID


def get_blueprint(spot_id: str) -> SpotBlueprint:
    """Raises KeyError for an id outside the fixed spot set."""
    return _BY_ID[spot_id]


def default_spots():
    """The blueprint as a list of unoccupied SpotStates, in board order."""
    from app.services.spot_store import SpotState

    return [SpotState.empty(spot) for spot in SPOT_BLUEPRINT]
