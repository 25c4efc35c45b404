# app/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Local persistence (device identity) ───────────────────────────────
    DATABASE_URL: str = "sqlite:///./parking_board.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "127.0.0.1"
    BACKEND_PORT: int = 8080

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to enable auth on API endpoints

    # ── Firebase / Firestore ──────────────────────────────────────────────
    # All six must be set for realtime sync; otherwise the board runs locally.
    # They only gate remote mode: firestore.Client authenticates through
    # Application Default Credentials (GOOGLE_APPLICATION_CREDENTIALS or
    # gcloud auth) for FIREBASE_PROJECT_ID. FIREBASE_API_KEY is not sent anywhere.
    FIREBASE_API_KEY: Optional[str] = None
    FIREBASE_AUTH_DOMAIN: Optional[str] = None
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_STORAGE_BUCKET: Optional[str] = None
    FIREBASE_MESSAGING_SENDER_ID: Optional[str] = None
    FIREBASE_APP_ID: Optional[str] = None

    SPOTS_COLLECTION: str = "parking-spots"

    @property
    def FIREBASE_CONFIG(self) -> dict:
        return {
            "apiKey": self.FIREBASE_API_KEY,
            "authDomain": self.FIREBASE_AUTH_DOMAIN,
            "projectId": self.FIREBASE_PROJECT_ID,
            "storageBucket": self.FIREBASE_STORAGE_BUCKET,
            "messagingSenderId": self.FIREBASE_MESSAGING_SENDER_ID,
            "appId": self.FIREBASE_APP_ID,
        }

    @property
    def firebase_enabled(self) -> bool:
        return all(bool(value and value.strip()) for value in self.FIREBASE_CONFIG.values())

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
