"""Account: one running balance per user."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import relationship

from app.db.session import Base

# Largest value Numeric(10, 2) can hold
MAX_BALANCE = Decimal("99999999.99")


class Account(Base):
    """Balance held by a single owner. Only the balance updater writes to balance."""

    __tablename__ = "accounts"
    __table_args__ = (CheckConstraint("balance >= 0", name="ck_accounts_balance_non_negative"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, unique=True)
    balance = Column(Numeric(10, 2), nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    owner = relationship("User", back_populates="account")
