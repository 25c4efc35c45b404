# app/models/local_setting.py
"""
Device-local key/value settings table.
Holds values owned by this device only (e.g. the roommate display name).
Never synchronized to the shared spot store.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from app.database import Base


class LocalSetting(Base):
    __tablename__ = "local_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(100), unique=True, nullable=False, index=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<LocalSetting {self.key}={self.value!r}>"
