"""SQLAlchemy model mirroring the persisted rate JSON structure."""
from __future__ import annotations

from sqlalchemy import Boolean, Column, Float, String, Text

from .session import Base


class RateRecord(Base):
    __tablename__ = "rates"

    id = Column(String(64), primary_key=True)
    title = Column(String(255), nullable=False, index=True)
    amount = Column(Float, nullable=False, default=0.0)
    description = Column(Text, nullable=False, default="")
    currency = Column(String(8), nullable=False)
    rate_type = Column(String(16), nullable=False)
    created_at = Column(String(32), nullable=False)
    created_by = Column(String(255), nullable=False)
    modified_at = Column(String(32), nullable=False)
    modified_by = Column(String(255), nullable=False)
    disabled = Column(Boolean, nullable=False, default=False)
