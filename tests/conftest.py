import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_JSON", "false")

from typing import AsyncGenerator, Callable, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.main import app
from app.auth.schemas import UserInfo, UserProvisionRequest
from app.auth.security import create_access_token
from app.auth.services import provision_user
from app.core.enums import UserRole
from app.db.session import Base, get_db

PASSWORD = "StrongPass123"


def _enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """Let SQLAlchemy issue BEGIN itself so SAVEPOINT works on pysqlite/aiosqlite."""

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


@pytest.fixture()
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh SQLite file database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}", echo=False)
    _enable_sqlite_savepoints(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for a test and override FastAPI dependency."""
    async with session_factory() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def make_user(db_session: AsyncSession) -> Callable:
    """Provision a user (and account) directly through the service layer.

    Returns `UserInfo` values, not ORM rows; a service rollback expires rows.
    """
    counter = {"n": 0}

    async def _make(role: UserRole, full_name: str = "Test User") -> UserInfo:
        counter["n"] += 1
        n = counter["n"]
        return await provision_user(
            db_session,
            UserProvisionRequest(
                full_name=full_name,
                email=f"{role.value}{n}@umat.edu.gh",
                password=PASSWORD,
                role=role,
                student_id=f"UMAT/{n:04d}" if role == UserRole.STUDENT else None,
            ),
            provisioned_by=None,
        )

    return _make


@pytest.fixture()
async def admin(make_user) -> UserInfo:
    return await make_user(UserRole.ADMIN, "Ama Admin")


@pytest.fixture()
async def staff(make_user) -> UserInfo:
    return await make_user(UserRole.STAFF, "Kofi Staff")


@pytest.fixture()
async def student(make_user) -> UserInfo:
    return await make_user(UserRole.STUDENT, "Esi Student")


@pytest.fixture()
def auth_headers() -> Callable[[UserInfo], Dict[str, str]]:
    """Bearer headers for a user, skipping the login round-trip."""

    def _headers(user: UserInfo) -> Dict[str, str]:
        token = create_access_token(user.id, user.role.value)
        return {"Authorization": f"Bearer {token}"}

    return _headers
