"""User provisioning (admin only). Role changes are not exposed."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.rbac import check_permission
from app.auth.schemas import CurrentUser, UserInfo, UserProvisionRequest
from app.auth import services
from app.core.enums import UserRole
from app.core.exceptions import ServiceError
from app.db.session import get_db

router = APIRouter(
    prefix="/api/v1/users",
    tags=["users"],
    dependencies=[Depends(check_permission("users", "manage"))],
)


@router.post("", response_model=UserInfo, status_code=status.HTTP_201_CREATED)
async def provision_user(
    payload: UserProvisionRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> UserInfo:
    try:
        return await services.provision_user(db, payload, provisioned_by=current_user.id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[UserInfo])
async def list_users(
    role: Optional[UserRole] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> List[UserInfo]:
    return await services.list_users(db, role=role.value if role else None)
