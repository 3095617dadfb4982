"""Audit logger: best-effort, append-only before/after records."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuditWriteFailed
from app.core.logging import get_logger
from app.core.models import AuditRecord

logger = get_logger(__name__)


def _jsonable(value: Any) -> Any:
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def snapshot(obj: Any) -> Dict[str, Any]:
    """Column values of a mapped row as a JSON-ready dict."""
    mapper = inspect(obj).mapper
    return {attr.key: _jsonable(getattr(obj, attr.key)) for attr in mapper.column_attrs}


class AuditLogger:
    """
    Writes one AuditRecord per mutated row.

    Each write runs in a SAVEPOINT so a failing insert is discarded on its own
    while the surrounding business change still commits.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _write(self, record: AuditRecord) -> None:
        try:
            async with self.db.begin_nested():
                self.db.add(record)
        except SQLAlchemyError as e:
            raise AuditWriteFailed(f"Audit write for {record.action} failed: {e}") from e

    async def record(
        self,
        actor_id: Optional[UUID],
        entity_name: str,
        operation: str,
        before: Optional[Dict[str, Any]],
        after: Optional[Dict[str, Any]],
        entity_id: UUID,
    ) -> Optional[AuditRecord]:
        record = AuditRecord(
            actor_id=actor_id,
            entity_name=entity_name,
            entity_id=entity_id,
            operation=operation,
            action=f"{entity_name}_{operation}",
            before_snapshot=before,
            after_snapshot=after,
            created_at=datetime.utcnow(),
        )
        try:
            await self._write(record)
        except AuditWriteFailed as e:
            logger.error(
                "audit_write_failed",
                action=record.action,
                entity_id=str(entity_id),
                actor_id=str(actor_id) if actor_id else None,
                error=e.message,
            )
            return None
        return record
