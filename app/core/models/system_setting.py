"""System-wide settings managed by admins from the settings page."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, String, Uuid

from app.db.session import Base


class SystemSetting(Base):
    __tablename__ = "settings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    key = Column(String(100), nullable=False, unique=True)
    value = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
