"""Transactions: create, list, review. Review moves the balance and writes the audit trail in one unit."""

from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.core.enums import TransactionKind, TransactionStatus
from app.core.exceptions import InvalidAmount, InvalidTransition, NotFound, ServiceError
from app.core.logging import get_logger
from app.ledger import AuditLogger, BalanceUpdater, LedgerStore, TransactionFilter, snapshot, validate_transition

from .schemas import TransactionResponse

logger = get_logger(__name__)


async def create_transaction(
    db: AsyncSession,
    owner_id: UUID,
    kind: TransactionKind,
    amount: Decimal,
    description: str,
    created_by: Optional[UUID] = None,
) -> TransactionResponse:
    if amount is None or amount <= 0:
        raise InvalidAmount()
    description = description.strip()
    if not description:
        raise ServiceError("Description is required", status.HTTP_400_BAD_REQUEST)

    store = LedgerStore(db)
    if await store.get_account(owner_id) is None:
        raise NotFound("Owner has no account")

    try:
        txn = await store.insert_transaction(owner_id, kind, amount, description)
        await AuditLogger(db).record(
            created_by or owner_id, "transaction", "insert", None, snapshot(txn), entity_id=txn.id
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "transaction_created",
        transaction_id=str(txn.id),
        owner_id=str(owner_id),
        kind=kind.value,
        amount=str(amount),
    )
    return TransactionResponse.model_validate(txn)


async def set_transaction_status(
    db: AsyncSession,
    transaction_id: UUID,
    new_status: TransactionStatus,
    actor_id: UUID,
) -> TransactionResponse:
    """
    Approve or reject a pending transaction.

    Approval credits (payment) or debits (fee, fine) the owner's account. The
    status write, the balance write and their audit records are committed
    together; validation or balance failures roll back everything. Losing a
    race against another reviewer raises InvalidTransition.
    """
    store = LedgerStore(db)
    audit = AuditLogger(db)

    txn = await store.get_transaction(transaction_id)
    if txn is None:
        raise NotFound("Transaction not found")
    actor = await db.get(User, actor_id)
    if actor is None:
        raise NotFound("Reviewer not found")

    validate_transition(txn, new_status, actor.role)

    try:
        txn_before = snapshot(txn)
        if new_status == TransactionStatus.APPROVED:
            account = await store.get_account(txn.owner_id)
            if account is None:
                raise NotFound("Account not found for transaction owner")
            account_before = snapshot(account)
            account = await BalanceUpdater(store).apply_approval(txn, actor_id)
            await store.reload(txn)
            await audit.record(actor_id, "transaction", "update", txn_before, snapshot(txn), entity_id=txn.id)
            await audit.record(
                actor_id, "account", "update", account_before, snapshot(account), entity_id=account.id
            )
        else:
            if not await store.update_status(txn.id, new_status, actor_id):
                raise InvalidTransition("Transaction was reviewed concurrently and is no longer pending")
            await store.reload(txn)
            await audit.record(actor_id, "transaction", "update", txn_before, snapshot(txn), entity_id=txn.id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "transaction_reviewed",
        transaction_id=str(txn.id),
        status=new_status.value,
        reviewer_id=str(actor_id),
    )
    return TransactionResponse.model_validate(txn)


async def get_transaction(db: AsyncSession, transaction_id: UUID) -> TransactionResponse:
    txn = await LedgerStore(db).get_transaction(transaction_id)
    if txn is None:
        raise NotFound("Transaction not found")
    return TransactionResponse.model_validate(txn)


async def list_transactions(
    db: AsyncSession,
    owner_id: Optional[UUID] = None,
    status_filter: Optional[TransactionStatus] = None,
    kind: Optional[TransactionKind] = None,
    limit: Optional[int] = None,
) -> List[TransactionResponse]:
    """Newest first."""
    rows = await LedgerStore(db).list_transactions(
        TransactionFilter(owner_id=owner_id, status=status_filter, kind=kind, limit=limit)
    )
    return [TransactionResponse.model_validate(t) for t in rows]
