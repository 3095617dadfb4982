from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel


class AuditRecordResponse(BaseModel):
    id: UUID
    actor_id: Optional[UUID] = None
    entity_name: str
    entity_id: UUID
    operation: str
    action: str
    before_snapshot: Optional[Dict[str, Any]] = None
    after_snapshot: Optional[Dict[str, Any]] = None
    created_at: datetime

    class Config:
        from_attributes = True
