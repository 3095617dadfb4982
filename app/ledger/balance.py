"""Balance updater: credits payments and debits fees/fines on approval."""

from decimal import Decimal
from uuid import UUID

from app.core.enums import DEBIT_KINDS, TransactionKind, TransactionStatus
from app.core.exceptions import BalanceLimitExceeded, InsufficientFunds, InvalidTransition, NotFound
from app.core.logging import get_logger
from app.core.models import Account, Transaction
from app.ledger.store import LedgerStore

logger = get_logger(__name__)


def balance_delta(kind: str, amount: Decimal) -> Decimal:
    """Signed change an approved transaction makes to its owner's balance."""
    if TransactionKind(kind) in DEBIT_KINDS:
        return -amount
    return amount


class BalanceUpdater:
    def __init__(self, store: LedgerStore) -> None:
        self.store = store

    async def apply_approval(self, transaction: Transaction, approved_by: UUID) -> Account:
        """
        Approve ``transaction`` and apply its delta to the owner's account.

        The status write and the balance write go through the same session; the
        caller commits both or rolls both back. A transaction that is already
        approved is returned untouched so a retried approval never double-counts.
        """
        account = await self.store.get_account(transaction.owner_id)
        if account is None:
            raise NotFound("Account not found for transaction owner")

        if transaction.status == TransactionStatus.APPROVED.value:
            logger.info("approval_already_applied", transaction_id=str(transaction.id))
            return account
        if transaction.status != TransactionStatus.PENDING.value:
            raise InvalidTransition(f"Transaction is already {transaction.status}")

        claimed = await self.store.update_status(transaction.id, TransactionStatus.APPROVED, approved_by)
        if not claimed:
            # Another reviewer moved it out of pending after we read it
            raise InvalidTransition("Transaction was reviewed concurrently and is no longer pending")

        delta = balance_delta(transaction.kind, transaction.amount)
        if not await self.store.apply_delta(transaction.owner_id, delta):
            # a credit can only miss the guard on the upper bound
            event = "balance_limit_exceeded" if delta > 0 else "insufficient_funds"
            logger.warning(
                event,
                transaction_id=str(transaction.id),
                owner_id=str(transaction.owner_id),
                delta=str(delta),
            )
            if delta > 0:
                raise BalanceLimitExceeded()
            raise InsufficientFunds()

        await self.store.reload(account)
        return account
