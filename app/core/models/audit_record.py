"""Audit record: immutable before/after trail of every ledger mutation."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, String, Uuid, event

from app.db.session import Base


class AuditRecord(Base):
    """
    One row per mutated entity row. entity_id is a weak reference: the record
    outlives and never owns the row it describes.
    """

    __tablename__ = "audit_records"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    actor_id = Column(Uuid, nullable=True, index=True)
    entity_name = Column(String(50), nullable=False)
    entity_id = Column(Uuid, nullable=False, index=True)
    operation = Column(String(20), nullable=False)  # insert, update
    action = Column(String(80), nullable=False, index=True)  # e.g. transaction_update
    before_snapshot = Column(JSON, nullable=True)
    after_snapshot = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)


class AuditRecordImmutableError(RuntimeError):
    pass


@event.listens_for(AuditRecord, "before_update")
def prevent_audit_update(mapper, connection, target):
    raise AuditRecordImmutableError(f"Audit record {target.id} is append-only and cannot be modified")


@event.listens_for(AuditRecord, "before_delete")
def prevent_audit_delete(mapper, connection, target):
    raise AuditRecordImmutableError(f"Audit record {target.id} is append-only and cannot be deleted")
