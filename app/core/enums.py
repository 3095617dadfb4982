from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"
    STUDENT = "student"


class TransactionKind(str, Enum):
    PAYMENT = "payment"
    FEE = "fee"
    FINE = "fine"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Statuses a pending transaction may be moved to; both are terminal.
TERMINAL_STATUSES = frozenset({TransactionStatus.APPROVED, TransactionStatus.REJECTED})

# Kinds that debit the owner's account once approved.
DEBIT_KINDS = frozenset({TransactionKind.FEE, TransactionKind.FINE})
