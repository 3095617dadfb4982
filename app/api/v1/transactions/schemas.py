from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.enums import TransactionKind, TransactionStatus


class TransactionCreate(BaseModel):
    """New transaction; always starts pending. owner_id defaults to the caller."""

    owner_id: Optional[UUID] = Field(None, description="Owner; only admin/staff may create for someone else")
    kind: TransactionKind
    amount: Decimal = Field(..., max_digits=10, decimal_places=2)
    description: str = Field(..., min_length=1, max_length=2000)


class TransactionStatusUpdate(BaseModel):
    status: TransactionStatus


class TransactionResponse(BaseModel):
    id: UUID
    owner_id: UUID
    kind: TransactionKind
    amount: Decimal
    description: str
    status: TransactionStatus
    approved_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
