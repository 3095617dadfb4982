from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.rbac import has_permission
from app.auth.schemas import CurrentUser
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import AccountResponse
from . import service

router = APIRouter(prefix="/api/v1/accounts", tags=["accounts"])


@router.get("/me", response_model=AccountResponse)
async def get_my_account(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> AccountResponse:
    try:
        return await service.get_account(db, current_user.id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{owner_id}", response_model=AccountResponse)
async def get_account(
    owner_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> AccountResponse:
    """Own account for everyone; any account for admin/staff."""
    if owner_id != current_user.id and not has_permission(current_user.role, "accounts", "read_all"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )
    try:
        return await service.get_account(db, owner_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
