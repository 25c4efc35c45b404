# app/schemas/board.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class SpotOut(BaseModel):
    id: str
    label: str
    location: str
    occupant: Optional[str]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class SpotCardOut(SpotOut):
    status: str
    is_empty: bool
    is_mine: bool
    is_taken_by_other: bool
    is_busy: bool
    disabled: bool
    action_label: str


class BoardOut(BaseModel):
    current_name: Optional[str]
    loading: bool
    error: Optional[str]
    fatal: bool
    config_missing: bool
    config_message: Optional[str]
    name_dialog_open: bool
    roommates: list[str]
    spots: list[SpotCardOut]

    class Config:
        from_attributes = True


class ActionResult(BaseModel):
    status: str                  # ok | error | ignored | name_required
    spot_id: str
    detail: Optional[str] = None
    board: BoardOut
