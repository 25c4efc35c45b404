# app/services/spot_store.py
"""
Spot store capability shared by the remote (Firestore) and local backends.

A store owns the authoritative spot records. Consumers never read it
directly: they subscribe and receive full, blueprint-ordered snapshots.
Claim and release are read-verify-write operations; the verify step lives
here so both backends reject conflicts with identical messages.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Optional

from app.services.spot_registry import SPOT_BLUEPRINT, SpotBlueprint, Location

SnapshotHandler = Callable[[list], None]
ErrorHandler = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


# ── Errors ───────────────────────────────────────────────────────────────────
class SpotStoreError(Exception):
    """Backend failure while talking to the spot store."""


class SpotSetupError(SpotStoreError):
    """Spot documents could not be checked or created."""


class SpotSubscriptionError(SpotStoreError):
    """Live updates were interrupted."""


class SpotConflictError(SpotStoreError):
    """Another roommate holds the spot; the transaction was aborted."""

    def __init__(self, spot_id: str, occupant: str, message: str):
        super().__init__(message)
        self.spot_id = spot_id
        self.occupant = occupant
        self.message = message


# ── State ────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class SpotState:
    id: str
    label: str
    location: Location
    occupant: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def empty(cls, blueprint: SpotBlueprint) -> "SpotState":
        return cls(id=blueprint.id, label=blueprint.label, location=blueprint.location)

    @property
    def is_empty(self) -> bool:
        return not self.occupant

    def with_occupant(self, occupant: Optional[str], updated_at: datetime) -> "SpotState":
        return replace(self, occupant=occupant, updated_at=updated_at)

    def to_document(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "location": self.location.value,
            "occupant": self.occupant,
            "updatedAt": self.updated_at,
        }


def _as_datetime(value) -> Optional[datetime]:
    # Firestore hands back DatetimeWithNanoseconds (a datetime subclass);
    # a pending server timestamp shows up as None or a sentinel.
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def reconcile_snapshot(documents: dict) -> list:
    """
    Map {spot_id: document-dict} onto the blueprint order.
    Missing documents are treated as empty; unknown ids are dropped.
    """
    spots = []
    for blueprint in SPOT_BLUEPRINT:
        data = documents.get(blueprint.id) or {}
        spots.append(SpotState(
            id=blueprint.id,
            label=blueprint.label,
            location=blueprint.location,
            occupant=data.get("occupant") or None,
            updated_at=_as_datetime(data.get("updatedAt")),
        ))
    return spots


# ── Verify step of read-verify-write ─────────────────────────────────────────
def check_claim(spot_id: str, current_occupant: Optional[str], name: str) -> None:
    """A claim by the current occupant is allowed and re-stamps the spot."""
    if current_occupant and current_occupant != name:
        raise SpotConflictError(spot_id, current_occupant,
                                f"Spot already taken by {current_occupant}")


def check_release(spot_id: str, current_occupant: Optional[str], name: str) -> None:
    if current_occupant and current_occupant != name:
        raise SpotConflictError(spot_id, current_occupant,
                                f"Spot is now taken by {current_occupant}")


# ── Capability ───────────────────────────────────────────────────────────────
class SpotStore(ABC):
    """Selected once at startup; see app.services.store_factory."""

    remote = False

    @abstractmethod
    async def ensure_spots(self) -> None:
        """Create any missing spot record. Idempotent."""

    @abstractmethod
    def subscribe(self, on_snapshot: SnapshotHandler, on_error: ErrorHandler) -> Unsubscribe:
        """
        Register for full-board snapshots. Returns a disposer; once it has been
        called no further notifications reach either handler.
        """

    @abstractmethod
    async def claim(self, spot_id: str, name: str) -> None:
        """Set occupant = name. Raises SpotConflictError if held by someone else."""

    @abstractmethod
    async def release(self, spot_id: str, name: str) -> None:
        """Clear the occupant. Raises SpotConflictError if held by someone else."""
