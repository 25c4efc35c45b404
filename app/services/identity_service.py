# app/services/identity_service.py
"""
Local identity store — the display name this device parks under.
Self-asserted and unauthenticated: no uniqueness, no validation beyond trim.
Persisted in the local_settings table so it survives restarts.
"""

from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from app.models.local_setting import LocalSetting
from app.utils.logger import get_logger

logger = get_logger(__name__)

STORAGE_KEY = "roommate-parking-name"


class IdentityStore:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory
        self._name: Optional[str] = None

    @property
    def name(self) -> Optional[str]:
        return self._name

    def load(self) -> Optional[str]:
        """Returns the persisted name, or None if never set."""
        db = self._session_factory()
        try:
            row = db.query(LocalSetting).filter(LocalSetting.key == STORAGE_KEY).first()
            self._name = row.value if row and row.value else None
        finally:
            db.close()
        return self._name

    def save(self, name: str) -> Optional[str]:
        """Trims and persists. Empty input is ignored and returns None."""
        trimmed = (name or "").strip()
        if not trimmed:
            return None

        db = self._session_factory()
        try:
            row = db.query(LocalSetting).filter(LocalSetting.key == STORAGE_KEY).first()
            if not row:
                row = LocalSetting(key=STORAGE_KEY, value=trimmed)
                db.add(row)
            else:
                row.value = trimmed
            row.updated_at = datetime.utcnow()
            db.commit()
        finally:
            db.close()

        self._name = trimmed
        logger.info(f"👤 Display name set to {trimmed}")
        return trimmed
