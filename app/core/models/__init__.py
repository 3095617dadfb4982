from app.core.models.account import MAX_BALANCE, Account
from app.core.models.audit_record import AuditRecord, AuditRecordImmutableError
from app.core.models.system_setting import SystemSetting
from app.core.models.transaction import Transaction

__all__ = [
    "MAX_BALANCE",
    "Account",
    "AuditRecord",
    "AuditRecordImmutableError",
    "SystemSetting",
    "Transaction",
]
