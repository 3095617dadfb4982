from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel


class AccountResponse(BaseModel):
    id: UUID
    owner_id: UUID
    balance: Decimal
    updated_at: datetime
    created_at: datetime

    class Config:
        from_attributes = True
