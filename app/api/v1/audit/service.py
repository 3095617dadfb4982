"""Read-only access to the audit trail."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.models import AuditRecord
from app.ledger.store import storage_errors

from .schemas import AuditRecordResponse


async def list_audit_records(
    db: AsyncSession,
    actor_id: Optional[UUID] = None,
    entity_name: Optional[str] = None,
    entity_id: Optional[UUID] = None,
    action: Optional[str] = None,
    limit: int = 100,
) -> List[AuditRecordResponse]:
    """Newest first."""
    stmt = select(AuditRecord)
    if actor_id is not None:
        stmt = stmt.where(AuditRecord.actor_id == actor_id)
    if entity_name:
        stmt = stmt.where(AuditRecord.entity_name == entity_name)
    if entity_id is not None:
        stmt = stmt.where(AuditRecord.entity_id == entity_id)
    if action:
        stmt = stmt.where(AuditRecord.action == action)
    stmt = stmt.order_by(AuditRecord.created_at.desc()).limit(limit)
    async with storage_errors():
        result = await db.execute(stmt)
    return [AuditRecordResponse.model_validate(r) for r in result.scalars().all()]
