from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import check_permission
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import AuditRecordResponse
from . import service

router = APIRouter(prefix="/api/v1/audit", tags=["audit"])


@router.get(
    "",
    response_model=List[AuditRecordResponse],
    dependencies=[Depends(check_permission("audit", "read"))],
)
async def list_audit_records(
    actor_id: Optional[UUID] = Query(None),
    entity_name: Optional[str] = Query(None, description="transaction, account or setting"),
    entity_id: Optional[UUID] = Query(None),
    action: Optional[str] = Query(None, description="e.g. transaction_update"),
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
) -> List[AuditRecordResponse]:
    try:
        return await service.list_audit_records(
            db,
            actor_id=actor_id,
            entity_name=entity_name,
            entity_id=entity_id,
            action=action,
            limit=limit,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
