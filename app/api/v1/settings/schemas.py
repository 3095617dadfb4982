from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel


class SettingUpdate(BaseModel):
    value: Any


class SettingResponse(BaseModel):
    id: UUID
    key: str
    value: Any
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
