# app/services/firestore_spot_store.py
"""
Remote synchronization channel — Google Cloud Firestore.

Collection: parking-spots (one document per spot, keyed by spot id)
Document:   {id, label, location, occupant: str|None, updatedAt: server timestamp}

The client library is synchronous; blocking calls are pushed to worker
threads so the event loop stays responsive. Snapshot callbacks arrive on
the library's watch thread.
"""

import asyncio
import threading

from google.api_core import exceptions as api_exceptions
from google.cloud import exceptions as gexc
from google.cloud import firestore

from app.services.spot_registry import SPOT_BLUEPRINT, SpotBlueprint, get_blueprint
from app.services.spot_store import (
    SpotConflictError,
    SpotSetupError,
    SpotStore,
    SpotStoreError,
    SpotSubscriptionError,
    check_claim,
    check_release,
    reconcile_snapshot,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _current_occupant(snapshot):
    if not snapshot.exists:
        return None
    return (snapshot.to_dict() or {}).get("occupant") or None


def apply_claim(transaction, ref, spot_id: str, name: str) -> None:
    """Read-verify-write body for a claim. Runs inside a Firestore transaction."""
    snapshot = ref.get(transaction=transaction)
    check_claim(spot_id, _current_occupant(snapshot), name)
    transaction.update(ref, {"occupant": name, "updatedAt": firestore.SERVER_TIMESTAMP})


def apply_release(transaction, ref, spot_id: str, name: str) -> None:
    """Read-verify-write body for a release. Runs inside a Firestore transaction."""
    snapshot = ref.get(transaction=transaction)
    check_release(spot_id, _current_occupant(snapshot), name)
    transaction.update(ref, {"occupant": None, "updatedAt": firestore.SERVER_TIMESTAMP})


class FirestoreSpotStore(SpotStore):
    remote = True

    def __init__(self, client, collection: str = "parking-spots", liveness_interval: float = 5.0):
        self._client = client
        self._collection_name = collection
        self._liveness_interval = liveness_interval

    @property
    def collection(self):
        return self._client.collection(self._collection_name)

    # ── Setup ────────────────────────────────────────────────────────────
    def _ensure_spot(self, blueprint: SpotBlueprint) -> bool:
        ref = self.collection.document(blueprint.id)
        if ref.get().exists:
            return False
        try:
            ref.create({
                "id": blueprint.id,
                "label": blueprint.label,
                "location": blueprint.location.value,
                "occupant": None,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            })
        except api_exceptions.AlreadyExists:
            # Another board created it between our read and write
            return False
        logger.info(f"🅿️  Created spot document {blueprint.id}")
        return True

    async def ensure_spots(self) -> None:
        try:
            await asyncio.gather(*(
                asyncio.to_thread(self._ensure_spot, blueprint) for blueprint in SPOT_BLUEPRINT
            ))
        except Exception as e:
            raise SpotSetupError(f"Could not prepare spot documents: {e}") from e

    # ── Live updates ─────────────────────────────────────────────────────
    def subscribe(self, on_snapshot, on_error):
        """
        Handlers run with the subscription lock held, so once unsubscribe()
        returns no delivery is in flight and none will follow.

        The watch gives up on unrecoverable stream errors by closing itself on
        a private thread; a timer polls watch.is_active to turn that into on_error.
        """
        lock = threading.RLock()
        state = {"closed": False, "watch": None, "timer": None}

        def _fail(exc):
            with lock:
                if state["closed"]:
                    return
                state["closed"] = True
                on_error(SpotSubscriptionError(str(exc)))

        def _on_docs(docs, changes, read_time):
            try:
                documents = {doc.id: doc.to_dict() or {} for doc in docs}
                spots = reconcile_snapshot(documents)
            except Exception as e:
                logger.error(f"Bad snapshot from {self._collection_name}: {e}", exc_info=True)
                _fail(e)
                return
            with lock:
                if state["closed"]:
                    return
                on_snapshot(spots)

        def _check_alive():
            with lock:
                if state["closed"]:
                    return
                watch = state["watch"]
                if watch is not None and not watch.is_active:
                    logger.error(f"Snapshot listener on {self._collection_name} stopped streaming")
                    _fail("snapshot stream closed")
                    return
                _schedule_check()

        def _schedule_check():
            timer = threading.Timer(self._liveness_interval, _check_alive)
            timer.daemon = True
            state["timer"] = timer
            timer.start()

        try:
            state["watch"] = self.collection.on_snapshot(_on_docs)
        except Exception as e:
            logger.error(f"Could not open snapshot listener: {e}", exc_info=True)
            _fail(e)
        else:
            with lock:
                if not state["closed"]:
                    _schedule_check()

        def unsubscribe():
            with lock:
                state["closed"] = True
                watch, state["watch"] = state["watch"], None
                timer, state["timer"] = state["timer"], None
            if timer is not None:
                timer.cancel()
            # Outside the lock: closing the watch joins its callback thread
            if watch is not None:
                watch.unsubscribe()

        return unsubscribe

    # ── Claim / release ──────────────────────────────────────────────────
    def _run(self, body, spot_id: str, name: str) -> None:
        get_blueprint(spot_id)
        ref = self.collection.document(spot_id)
        # A fresh wrapper per call: it carries this transaction's retry id.
        # Retries on contention; a raised conflict rolls back.
        txn_fn = firestore.transactional(body)
        try:
            txn_fn(self._client.transaction(), ref, spot_id, name)
        except SpotConflictError:
            raise
        except gexc.GoogleCloudError as e:
            raise SpotStoreError(f"Firestore error: {e}") from e
        except ValueError as e:
            # Raised by the wrapper once every attempt was aborted
            raise SpotStoreError(f"Firestore transaction gave up: {e}") from e

    async def claim(self, spot_id: str, name: str) -> None:
        await asyncio.to_thread(self._run, apply_claim, spot_id, name)
        logger.info(f"[SYNC] {spot_id} claimed by {name}")

    async def release(self, spot_id: str, name: str) -> None:
        await asyncio.to_thread(self._run, apply_release, spot_id, name)
        logger.info(f"[SYNC] {spot_id} released by {name}")
