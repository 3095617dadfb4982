"""Password hashing and bearer tokens for portal logins."""

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import bcrypt
from jose import JWTError, jwt

from app.core.config import settings


def hash_password(plain_password: str) -> str:
    hashed = bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored hash is not a bcrypt hash
        return False


def create_access_token(
    user_id: UUID,
    role: str,
    issued_at: Optional[datetime] = None,
    expires_minutes: Optional[int] = None,
) -> str:
    """
    Sign an access token for a portal user.

    The role claim is informational only; authorization always re-reads the
    user's role from the database.
    """
    if issued_at is None:
        issued_at = datetime.now(timezone.utc)
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes

    claims = {
        "sub": str(user_id),
        "role": role,
        "iat": int(issued_at.timestamp()),
        "exp": issued_at + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Optional[UUID]:
    """User id carried by a valid, unexpired token; None for anything else."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None

    subject = payload.get("sub")
    if not subject:
        return None
    try:
        return UUID(subject)
    except ValueError:
        return None
