# app/services/board_service.py
"""
Parking board — the single process-wide state owner.

Holds what one device sees: the spot snapshot, loading / error banners,
per-spot busy markers and the name dialog flag. Claim ("park here") and
release ("leave") are issued from here against whichever SpotStore was
selected at startup; results come back through the store subscription,
never by patching local state directly.

Lifecycle: start() subscribes and ensures the spot records exist,
stop() disposes the subscription exactly once, reload() does both.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from app.services.identity_service import IdentityStore
from app.services.spot_registry import ROOMMATES, default_spots, get_blueprint
from app.services.spot_store import SpotConflictError, SpotState, SpotStore
from app.utils.logger import get_logger

logger = get_logger(__name__)

SETUP_ERROR_MESSAGE = "Unable to connect to the parking board. Please refresh."
SUBSCRIPTION_ERROR_MESSAGE = "Realtime updates are unavailable. Try reloading the page."
CLAIM_FAILED_MESSAGE = "Could not claim the spot. Please try again."
RELEASE_FAILED_MESSAGE = "Could not release the spot. Please try again."
CONFIG_MISSING_MESSAGE = (
    "Firebase configuration is missing. Realtime sync is disabled until "
    "environment variables are provided."
)


class ActionOutcome(str, Enum):
    OK = "ok"
    ERROR = "error"
    IGNORED = "ignored"
    NAME_REQUIRED = "name_required"


@dataclass
class SpotCard:
    id: str
    label: str
    location: str
    occupant: Optional[str]
    updated_at: Optional[datetime]
    status: str
    is_empty: bool
    is_mine: bool
    is_taken_by_other: bool
    is_busy: bool
    disabled: bool
    action_label: str


@dataclass
class BoardView:
    current_name: Optional[str]
    loading: bool
    error: Optional[str]
    fatal: bool
    config_missing: bool
    config_message: Optional[str]
    name_dialog_open: bool
    roommates: List[str] = field(default_factory=lambda: list(ROOMMATES))
    spots: List[SpotCard] = field(default_factory=list)


def build_card(spot: SpotState, current_name: Optional[str], busy: bool, locked: bool) -> SpotCard:
    is_empty = spot.is_empty
    is_mine = bool(current_name) and spot.occupant == current_name
    taken_by_other = not is_empty and not is_mine

    if busy:
        action_label = "Saving…"
    elif is_empty:
        action_label = "Park here"
    elif is_mine:
        action_label = "Leave"
    else:
        action_label = f"Taken by {spot.occupant}"

    return SpotCard(
        id=spot.id,
        label=spot.label,
        location=spot.location.value,
        occupant=spot.occupant,
        updated_at=spot.updated_at,
        status="Empty" if is_empty else f"Parked by {spot.occupant}",
        is_empty=is_empty,
        is_mine=is_mine,
        is_taken_by_other=taken_by_other,
        is_busy=busy,
        disabled=taken_by_other or busy or locked,
        action_label=action_label,
    )


class ParkingBoard:
    def __init__(self, store: SpotStore, identity: IdentityStore):
        self._store = store
        self._identity = identity
        self._lock = threading.RLock()
        self._listeners = []
        self._unsubscribe = None
        self._generation = 0
        self._reset()

    def _reset(self):
        self.spots = default_spots()
        self.loading = self._store.remote
        self.error: Optional[str] = None
        self.fatal = False
        self.busy = set()
        self.name_dialog_open = False

    # ── Properties ───────────────────────────────────────────────────────
    @property
    def store(self) -> SpotStore:
        return self._store

    @property
    def config_missing(self) -> bool:
        return not self._store.remote

    @property
    def current_name(self) -> Optional[str]:
        return self._identity.name

    @property
    def started(self) -> bool:
        return self._unsubscribe is not None

    def get_spot(self, spot_id: str) -> SpotState:
        get_blueprint(spot_id)
        with self._lock:
            return next(spot for spot in self.spots if spot.id == spot_id)

    # ── Lifecycle ────────────────────────────────────────────────────────
    async def start(self):
        if self.started:
            return

        if not self._identity.load():
            self.name_dialog_open = True

        with self._lock:
            self._generation += 1
            generation = self._generation

        self._unsubscribe = self._store.subscribe(
            lambda spots: self._on_snapshot(generation, spots),
            lambda exc: self._on_subscription_error(generation, exc),
        )

        try:
            await self._store.ensure_spots()
        except Exception as e:
            logger.error(f"Spot setup failed: {e}", exc_info=True)
            self._fail(generation, SETUP_ERROR_MESSAGE)

        logger.info(f"🅿️  Board started ({'remote' if self._store.remote else 'local'} mode)")
        self._notify()

    def stop(self):
        with self._lock:
            self._generation += 1
            unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
            logger.info("🛑 Board subscription closed")

    async def reload(self):
        self.stop()
        with self._lock:
            self._reset()
        await self.start()

    # ── Store callbacks ──────────────────────────────────────────────────
    def _on_snapshot(self, generation: int, spots: list):
        with self._lock:
            if generation != self._generation:
                return
            self.spots = list(spots)
            self.loading = False
        self._notify()

    def _on_subscription_error(self, generation: int, exc: Exception):
        logger.error(f"Realtime subscription failed: {exc}")
        self._fail(generation, SUBSCRIPTION_ERROR_MESSAGE)

    def _fail(self, generation: int, message: str):
        with self._lock:
            if generation != self._generation:
                return
            self.error = message
            self.loading = False
            self.fatal = True
        self._notify()

    # ── Identity ─────────────────────────────────────────────────────────
    def open_name_dialog(self):
        self.name_dialog_open = True
        self._notify()

    def set_name(self, value: str) -> bool:
        """Empty names are ignored and the dialog stays as it was."""
        if self._identity.save(value) is None:
            return False
        self.name_dialog_open = False
        self._notify()
        return True

    # ── Claim / release ──────────────────────────────────────────────────
    async def park_here(self, spot_id: str) -> ActionOutcome:
        get_blueprint(spot_id)
        if self.fatal:
            return ActionOutcome.IGNORED

        name = self.current_name
        if not name:
            self.open_name_dialog()
            return ActionOutcome.NAME_REQUIRED

        return await self._run_action(spot_id, name, self._store.claim, "claim", CLAIM_FAILED_MESSAGE)

    async def leave_spot(self, spot_id: str) -> ActionOutcome:
        get_blueprint(spot_id)
        name = self.current_name
        if self.fatal or not name:
            return ActionOutcome.IGNORED

        return await self._run_action(spot_id, name, self._store.release, "release", RELEASE_FAILED_MESSAGE)

    async def tap(self, spot_id: str) -> ActionOutcome:
        """What a tap on a spot card does: park if empty, leave if mine."""
        spot = self.get_spot(spot_id)
        if self.loading or self.fatal or spot_id in self.busy:
            return ActionOutcome.IGNORED
        if spot.is_empty:
            return await self.park_here(spot_id)
        if spot.occupant == self.current_name:
            return await self.leave_spot(spot_id)
        return ActionOutcome.IGNORED

    async def _run_action(self, spot_id, name, action, verb, failure_message) -> ActionOutcome:
        if spot_id in self.busy:
            return ActionOutcome.IGNORED

        self.error = None
        self.busy.add(spot_id)
        self._notify()

        outcome = ActionOutcome.OK
        try:
            await action(spot_id, name)
        except SpotConflictError as e:
            logger.warning(f"[CONFLICT] {spot_id}: {e.message} (acting as {name})")
            self.error = e.message
            outcome = ActionOutcome.ERROR
        except Exception as e:
            logger.error(f"{verb} failed on {spot_id}: {e}", exc_info=True)
            self.error = failure_message
            outcome = ActionOutcome.ERROR
        finally:
            self.busy.discard(spot_id)
            self._notify()
        return outcome

    # ── View + change notifications ──────────────────────────────────────
    def cards(self) -> List[SpotCard]:
        name = self.current_name
        locked = self.loading or self.fatal
        with self._lock:
            return [build_card(spot, name, spot.id in self.busy, locked) for spot in self.spots]

    def view(self) -> BoardView:
        with self._lock:
            return BoardView(
                current_name=self.current_name,
                loading=self.loading,
                error=self.error,
                fatal=self.fatal,
                config_missing=self.config_missing,
                config_message=CONFIG_MISSING_MESSAGE if self.config_missing else None,
                name_dialog_open=self.name_dialog_open,
                spots=self.cards(),
            )

    def subscribe(self, listener: Callable[[BoardView], None]) -> Callable[[], None]:
        """Listeners may be called from the store's callback thread."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        with self._lock:
            listeners = list(self._listeners)
        if not listeners:
            return
        view = self.view()
        for listener in listeners:
            try:
                listener(view)
            except Exception as e:
                logger.error(f"Board listener failed: {e}", exc_info=True)
