# app/services/store_factory.py
"""Picks the spot store for this process: Firestore when configured, else local."""

from app.config import Settings
from app.services.spot_store import SpotStore
from app.utils.logger import get_logger

logger = get_logger(__name__)


def create_spot_store(settings: Settings) -> SpotStore:
    if not settings.firebase_enabled:
        missing = [k for k, v in settings.FIREBASE_CONFIG.items() if not (v and v.strip())]
        logger.warning(f"⚠️  Firebase configuration missing ({', '.join(missing)}) — realtime sync disabled")
        from app.services.local_spot_store import LocalSpotStore
        return LocalSpotStore()

    from google.cloud import firestore
    from app.services.firestore_spot_store import FirestoreSpotStore

    client = firestore.Client(project=settings.FIREBASE_PROJECT_ID)
    logger.info(f"📡 Realtime sync via Firestore project {settings.FIREBASE_PROJECT_ID} "
                f"(collection '{settings.SPOTS_COLLECTION}')")
    return FirestoreSpotStore(client, collection=settings.SPOTS_COLLECTION)
