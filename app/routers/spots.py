# app/routers/spots.py
"""
Spot endpoints — read state, and claim / release on behalf of this device's name.
Actions always return HTTP 200 with a status field; failures are reported
the same way the board shows them (error banner text in `detail`).
"""

from fastapi import APIRouter, Depends, HTTPException

from app.routers.board import get_board, render_board
from app.schemas.board import ActionResult, SpotOut
from app.services.board_service import ActionOutcome, ParkingBoard
from app.services.spot_registry import is_known_spot

router = APIRouter()


def _require_spot(spot_id: str):
    if not is_known_spot(spot_id):
        raise HTTPException(status_code=404, detail=f"Spot '{spot_id}' not found")


def _result(board: ParkingBoard, spot_id: str, outcome: ActionOutcome) -> ActionResult:
    detail = None
    if outcome == ActionOutcome.ERROR:
        detail = board.error
    elif outcome == ActionOutcome.NAME_REQUIRED:
        detail = "Set your name before parking"
    return ActionResult(status=outcome.value, spot_id=spot_id, detail=detail,
                        board=render_board(board))


def _spot_out(spot) -> SpotOut:
    return SpotOut(id=spot.id, label=spot.label, location=spot.location.value,
                   occupant=spot.occupant, updated_at=spot.updated_at)


@router.get("/spots", response_model=list[SpotOut], summary="All four spots, in board order")
def list_spots(board: ParkingBoard = Depends(get_board)):
    return [_spot_out(spot) for spot in board.spots]


@router.get("/spots/{spot_id}", response_model=SpotOut)
def get_spot(spot_id: str, board: ParkingBoard = Depends(get_board)):
    _require_spot(spot_id)
    return _spot_out(board.get_spot(spot_id))


@router.post("/spots/{spot_id}/tap", response_model=ActionResult, summary="Tap a spot card")
async def tap_spot(spot_id: str, board: ParkingBoard = Depends(get_board)):
    """Park if the spot is empty, leave if it is yours, otherwise ignored."""
    _require_spot(spot_id)
    return _result(board, spot_id, await board.tap(spot_id))


@router.post("/spots/{spot_id}/claim", response_model=ActionResult, summary="Park here")
async def claim_spot(spot_id: str, board: ParkingBoard = Depends(get_board)):
    _require_spot(spot_id)
    return _result(board, spot_id, await board.park_here(spot_id))


@router.post("/spots/{spot_id}/release", response_model=ActionResult, summary="Leave the spot")
async def release_spot(spot_id: str, board: ParkingBoard = Depends(get_board)):
    _require_spot(spot_id)
    return _result(board, spot_id, await board.leave_spot(spot_id))
