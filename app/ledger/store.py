"""Ledger store: accounts and transactions on top of an AsyncSession."""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import AsyncIterator, List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import TransactionKind, TransactionStatus
from app.core.exceptions import StorageUnavailable
from app.core.logging import get_logger
from app.core.models import MAX_BALANCE, Account, Transaction

logger = get_logger(__name__)


@dataclass
class TransactionFilter:
    owner_id: Optional[UUID] = None
    status: Optional[TransactionStatus] = None
    kind: Optional[TransactionKind] = None
    limit: Optional[int] = None


@asynccontextmanager
async def storage_errors() -> AsyncIterator[None]:
    """Report lost connections as StorageUnavailable; everything else propagates unchanged."""
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        logger.error("storage_unavailable", error=str(e.orig or e))
        raise StorageUnavailable() from e


class LedgerStore:
    """
    Reads and writes ledger rows inside the caller's unit of work. Nothing here
    commits: the service that opened the unit decides commit or rollback.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        async with storage_errors():
            return await self.db.get(Transaction, transaction_id, populate_existing=True)

    async def get_account(self, owner_id: UUID) -> Optional[Account]:
        async with storage_errors():
            result = await self.db.execute(
                select(Account).where(Account.owner_id == owner_id).execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()

    async def list_transactions(self, flt: TransactionFilter) -> List[Transaction]:
        stmt = select(Transaction)
        if flt.owner_id is not None:
            stmt = stmt.where(Transaction.owner_id == flt.owner_id)
        if flt.status is not None:
            stmt = stmt.where(Transaction.status == flt.status.value)
        if flt.kind is not None:
            stmt = stmt.where(Transaction.kind == flt.kind.value)
        stmt = stmt.order_by(Transaction.created_at.desc(), Transaction.id)
        if flt.limit is not None:
            stmt = stmt.limit(flt.limit)
        async with storage_errors():
            result = await self.db.execute(stmt)
            return list(result.scalars().all())

    async def insert_transaction(
        self,
        owner_id: UUID,
        kind: TransactionKind,
        amount: Decimal,
        description: str,
    ) -> Transaction:
        now = datetime.utcnow()
        txn = Transaction(
            owner_id=owner_id,
            kind=kind.value,
            amount=amount,
            description=description,
            status=TransactionStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        async with storage_errors():
            self.db.add(txn)
            await self.db.flush()
        return txn

    async def insert_account(self, owner_id: UUID) -> Account:
        now = datetime.utcnow()
        account = Account(owner_id=owner_id, balance=Decimal("0.00"), created_at=now, updated_at=now)
        async with storage_errors():
            self.db.add(account)
            await self.db.flush()
        return account

    async def update_status(
        self,
        transaction_id: UUID,
        new_status: TransactionStatus,
        reviewer_id: Optional[UUID],
    ) -> bool:
        """
        Move a transaction out of pending. The write only matches while the row
        is still pending, so of two concurrent reviewers exactly one gets True.
        """
        stmt = (
            update(Transaction)
            .where(
                Transaction.id == transaction_id,
                Transaction.status == TransactionStatus.PENDING.value,
            )
            .values(
                status=new_status.value,
                approved_by=reviewer_id,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        async with storage_errors():
            result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def apply_delta(self, owner_id: UUID, delta: Decimal) -> bool:
        """Add delta to the owner's balance unless the result would leave [0, MAX_BALANCE]."""
        stmt = (
            update(Account)
            .where(
                Account.owner_id == owner_id,
                Account.balance + delta >= 0,
                Account.balance + delta <= MAX_BALANCE,
            )
            .values(balance=Account.balance + delta, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        async with storage_errors():
            result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def reload(self, obj) -> None:
        async with storage_errors():
            await self.db.refresh(obj)
