# app/schemas/identity.py
from pydantic import BaseModel
from typing import Optional


class IdentityUpdate(BaseModel):
    name: str


class IdentityOut(BaseModel):
    name: Optional[str]
    name_dialog_open: bool
    roommates: list[str]
