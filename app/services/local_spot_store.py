# app/services/local_spot_store.py
"""
Local fallback mode — used when Firebase is not configured.
Spot state lives in memory for this process only. Single client, so there
is nothing to coordinate and no conflict detection is attempted.
"""

from datetime import datetime, timezone

from app.services.spot_registry import default_spots, get_blueprint
from app.services.spot_store import SpotStore
from app.utils.logger import get_logger

logger = get_logger(__name__)


class LocalSpotStore(SpotStore):
    remote = False

    def __init__(self):
        self._spots = default_spots()
        self._handlers = []

    @property
    def spots(self) -> list:
        return list(self._spots)

    async def ensure_spots(self) -> None:
        return None

    def subscribe(self, on_snapshot, on_error):
        entry = (on_snapshot, on_error)
        self._handlers.append(entry)
        on_snapshot(self.spots)

        def unsubscribe():
            if entry in self._handlers:
                self._handlers.remove(entry)

        return unsubscribe

    async def claim(self, spot_id: str, name: str) -> None:
        self._set_occupant(spot_id, name)

    async def release(self, spot_id: str, name: str) -> None:
        self._set_occupant(spot_id, None)

    def _set_occupant(self, spot_id, occupant):
        get_blueprint(spot_id)
        now = datetime.now(timezone.utc)
        self._spots = [
            spot.with_occupant(occupant, now) if spot.id == spot_id else spot
            for spot in self._spots
        ]
        logger.info(f"[LOCAL] {spot_id} → {occupant or 'empty'}")
        snapshot = self.spots
        for on_snapshot, _ in list(self._handlers):
            on_snapshot(snapshot)
