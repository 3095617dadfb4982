"""
Ledger core: accounts, transactions and their audit trail.

store      -- reads and guarded writes against accounts/transactions
validator  -- pending -> approved | rejected state machine and role gate
balance    -- applies the approval delta exactly once
audit      -- append-only before/after records, best-effort
"""

from app.ledger.audit import AuditLogger, snapshot
from app.ledger.balance import BalanceUpdater, balance_delta
from app.ledger.store import LedgerStore, TransactionFilter
from app.ledger.validator import validate_transition

__all__ = [
    "AuditLogger",
    "BalanceUpdater",
    "LedgerStore",
    "TransactionFilter",
    "balance_delta",
    "snapshot",
    "validate_transition",
]
