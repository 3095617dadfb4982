"""Transactions router: create, list, get, approve/reject."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.rbac import check_permission, has_permission
from app.auth.schemas import CurrentUser
from app.core.enums import TransactionKind, TransactionStatus
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import TransactionCreate, TransactionResponse, TransactionStatusUpdate
from . import service

router = APIRouter(prefix="/api/v1/transactions", tags=["transactions"])


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(check_permission("transactions", "create"))],
)
async def create_transaction(
    payload: TransactionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> TransactionResponse:
    owner_id = payload.owner_id or current_user.id
    if owner_id != current_user.id and not has_permission(current_user.role, "transactions", "create_any"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only create transactions for yourself",
        )
    try:
        return await service.create_transaction(
            db,
            owner_id,
            payload.kind,
            payload.amount,
            payload.description,
            created_by=current_user.id,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "",
    response_model=List[TransactionResponse],
)
async def list_transactions(
    owner_id: Optional[UUID] = Query(None),
    transaction_status: Optional[TransactionStatus] = Query(None, alias="status"),
    kind: Optional[TransactionKind] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> List[TransactionResponse]:
    """Admin/staff see every transaction; everyone else only their own."""
    if not has_permission(current_user.role, "transactions", "read_all"):
        owner_id = current_user.id
    try:
        return await service.list_transactions(
            db,
            owner_id=owner_id,
            status_filter=transaction_status,
            kind=kind,
            limit=limit,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse,
)
async def get_transaction(
    transaction_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> TransactionResponse:
    try:
        txn = await service.get_transaction(db, transaction_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if txn.owner_id != current_user.id and not has_permission(current_user.role, "transactions", "read_all"):
        # Same answer as a missing row so ids of other users' transactions do not leak
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return txn


@router.patch(
    "/{transaction_id}/status",
    response_model=TransactionResponse,
    dependencies=[Depends(check_permission("transactions", "review"))],
)
async def set_transaction_status(
    transaction_id: UUID,
    payload: TransactionStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> TransactionResponse:
    """Approve or reject a pending transaction. Approval moves the owner's balance."""
    try:
        return await service.set_transaction_status(
            db,
            transaction_id,
            payload.status,
            actor_id=current_user.id,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
