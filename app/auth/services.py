from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.auth.schemas import LoginRequest, LoginResponse, UserInfo, UserProvisionRequest
from app.auth.security import create_access_token, hash_password, verify_password
from app.core.exceptions import ServiceError
from app.core.logging import get_logger
from app.ledger import AuditLogger, LedgerStore, snapshot

logger = get_logger(__name__)


async def login_user(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    # Find user by email (case-insensitive)
    user_stmt = select(User).where(func.lower(User.email) == func.lower(payload.email))
    user_result = await db.execute(user_stmt)
    user: Optional[User] = user_result.scalar_one_or_none()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("login_failed", email=payload.email)
        raise ServiceError("Invalid credentials", status.HTTP_401_UNAUTHORIZED)

    issued_at = datetime.now(timezone.utc)
    access_token = create_access_token(user.id, user.role, issued_at=issued_at)
    logger.info("login_succeeded", user_id=str(user.id))
    return LoginResponse(
        access_token=access_token,
        user=UserInfo.model_validate(user),
        issued_at=issued_at,
    )


async def provision_user(
    db: AsyncSession,
    payload: UserProvisionRequest,
    provisioned_by: Optional[UUID],
) -> UserInfo:
    """Create a user together with their account (balance 0.00). One account per user."""
    existing = (
        await db.execute(select(User.id).where(func.lower(User.email) == payload.email.lower()))
    ).scalar_one_or_none()
    if existing:
        raise ServiceError("Email is already in use", status.HTTP_409_CONFLICT)

    store = LedgerStore(db)
    try:
        user = User(
            role=payload.role.value,
            full_name=payload.full_name.strip(),
            email=payload.email,
            password_hash=hash_password(payload.password),
            student_id=payload.student_id.strip() if payload.student_id else None,
            department=payload.department.strip() if payload.department else None,
            created_at=datetime.utcnow(),
        )
        db.add(user)
        await db.flush()
        account = await store.insert_account(user.id)
        await AuditLogger(db).record(
            provisioned_by, "account", "insert", None, snapshot(account), entity_id=account.id
        )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ServiceError("User could not be created: duplicate email or student ID", status.HTTP_409_CONFLICT)
    except Exception:
        await db.rollback()
        raise

    await db.refresh(user)
    logger.info("user_provisioned", user_id=str(user.id), role=user.role)
    return UserInfo.model_validate(user)


async def list_users(db: AsyncSession, role: Optional[str] = None) -> List[UserInfo]:
    stmt = select(User)
    if role:
        stmt = stmt.where(User.role == role)
    stmt = stmt.order_by(User.full_name)
    result = await db.execute(stmt)
    return [UserInfo.model_validate(u) for u in result.scalars().all()]


async def get_user(db: AsyncSession, user_id: UUID) -> UserInfo:
    user = await db.get(User, user_id)
    if not user:
        raise ServiceError("User not found", status.HTTP_404_NOT_FOUND)
    return UserInfo.model_validate(user)
