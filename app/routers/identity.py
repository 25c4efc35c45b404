# app/routers/identity.py
"""Display name for this device — the name spots are claimed under."""

from fastapi import APIRouter, Depends

from app.routers.board import get_board
from app.schemas.identity import IdentityOut, IdentityUpdate
from app.services.board_service import ParkingBoard
from app.services.spot_registry import ROOMMATES

router = APIRouter()


def _identity(board: ParkingBoard) -> IdentityOut:
    return IdentityOut(name=board.current_name, name_dialog_open=board.name_dialog_open,
                       roommates=list(ROOMMATES))


@router.get("/identity", response_model=IdentityOut)
def get_identity(board: ParkingBoard = Depends(get_board)):
    return _identity(board)


@router.put("/identity", summary="Set or change your name")
def set_identity(body: IdentityUpdate, board: ParkingBoard = Depends(get_board)):
    """Blank names are rejected silently: nothing is saved and the dialog stays open."""
    saved = board.set_name(body.name)
    return {"status": "saved" if saved else "rejected", "identity": _identity(board)}


@router.post("/identity/dialog", response_model=IdentityOut, summary="Open the name dialog")
def open_name_dialog(board: ParkingBoard = Depends(get_board)):
    board.open_name_dialog()
    return _identity(board)
