# app/routers/health.py
"""
System health check endpoint.
Returns status of backend + local DB + spot sync mode.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from app.database import get_db
from app.routers.board import get_board
from app.services.board_service import ParkingBoard
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db), board: ParkingBoard = Depends(get_board)):
    """
    Returns:
    - Backend status
    - Local database connectivity (identity storage)
    - Sync mode (remote Firestore or local fallback) and whether the board session is usable
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "sync": "remote" if board.store.remote else "local",
        "board": "ok",
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    if board.fatal:
        result["board"] = f"error: {board.error}"
        result["status"] = "degraded"
    elif board.loading:
        result["board"] = "loading"

    return result
