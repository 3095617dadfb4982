"""
Create the schema and the first admin user.

Run once against a fresh database with env set:
  INITIAL_ADMIN_EMAIL=admin@umat.edu.gh
  INITIAL_ADMIN_PASSWORD=YourSecurePassword

  python -m app.db.init_db

Creates every table (no-op for tables that exist) and, if the email/password
are set and no user has that email yet, an admin user with its account.
"""
import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

import app.core.models  # noqa: F401  registers ledger tables on Base.metadata
from app.auth.models import User
from app.auth.schemas import UserProvisionRequest
from app.auth.services import provision_user
from app.core.config import settings
from app.core.enums import UserRole
from app.core.logging import configure_logging, get_logger
from app.db.session import AsyncSessionLocal, Base, engine

logger = get_logger(__name__)

INITIAL_ADMIN_FULL_NAME = "Finance Administrator"


async def create_schema(bind: AsyncEngine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_initial_admin(db: AsyncSession) -> None:
    email = settings.initial_admin_email
    password = settings.initial_admin_password
    if not email or not password:
        logger.info("initial_admin_skipped", reason="INITIAL_ADMIN_EMAIL/INITIAL_ADMIN_PASSWORD not set")
        return

    existing = (await db.execute(select(User.id).where(User.email == email))).scalar_one_or_none()
    if existing:
        logger.info("initial_admin_exists", email=email)
        return

    admin = await provision_user(
        db,
        UserProvisionRequest(
            full_name=INITIAL_ADMIN_FULL_NAME,
            email=email,
            password=password,
            role=UserRole.ADMIN,
        ),
        provisioned_by=None,
    )
    logger.info("initial_admin_created", user_id=str(admin.id), email=email)


async def main() -> None:
    configure_logging(settings.log_level, json_logs=settings.log_json)
    await create_schema(engine)
    async with AsyncSessionLocal() as db:
        await seed_initial_admin(db)
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
