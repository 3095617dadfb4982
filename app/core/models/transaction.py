"""Transaction: a payment, fee or fine awaiting review."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.session import Base


class Transaction(Base):
    """Created pending; moves once to approved or rejected and is immutable afterwards."""

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_positive_amount"),
        CheckConstraint("kind IN ('payment', 'fee', 'fine')", name="ck_transactions_kind"),
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="ck_transactions_status"),
        Index("ix_transactions_owner_status", "owner_id", "status"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    kind = Column(String(20), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    # Reviewer who approved or rejected; null while pending
    approved_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    owner = relationship("User", foreign_keys=[owner_id])
    approver = relationship("User", foreign_keys=[approved_by])
