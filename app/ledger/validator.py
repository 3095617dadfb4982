"""Transition rules for transaction review."""

from app.auth.rbac import has_permission
from app.core.enums import TERMINAL_STATUSES, TransactionStatus
from app.core.exceptions import Forbidden, InvalidAmount, InvalidTransition
from app.core.models import Transaction


def validate_transition(
    transaction: Transaction,
    requested_status: TransactionStatus,
    actor_role: str,
) -> None:
    """
    Raise if ``actor_role`` may not move ``transaction`` to ``requested_status``.

    Only pending -> approved and pending -> rejected are allowed, only reviewers
    (admin, staff) may perform them, and the amount must be positive. Nothing is
    written; the caller performs the change.
    """
    if transaction.status != TransactionStatus.PENDING.value:
        raise InvalidTransition(
            f"Transaction is already {transaction.status}; only pending transactions can be reviewed"
        )
    if requested_status not in TERMINAL_STATUSES:
        raise InvalidTransition(f"Cannot move a transaction to {requested_status.value}")
    if not has_permission(actor_role, "transactions", "review"):
        raise Forbidden("Only admin or staff can approve or reject transactions")
    if transaction.amount is None or transaction.amount <= 0:
        raise InvalidAmount()
