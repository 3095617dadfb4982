from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFound(ServiceError):
    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class Forbidden(ServiceError):
    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class InvalidTransition(ServiceError):
    """Status change requested on a transaction that is no longer pending."""

    def __init__(self, message: str = "Only pending transactions can be approved or rejected") -> None:
        super().__init__(message, status.HTTP_409_CONFLICT)


class InvalidAmount(ServiceError):
    def __init__(self, message: str = "Amount must be greater than zero") -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class InsufficientFunds(ServiceError):
    """Approving the transaction would take the account balance below zero."""

    def __init__(self, message: str = "Insufficient funds: balance cannot go negative") -> None:
        super().__init__(message, status.HTTP_409_CONFLICT)


class BalanceLimitExceeded(ServiceError):
    """Approving the transaction would push the balance past what the account column holds."""

    def __init__(self, message: str = "Balance would exceed the maximum account balance") -> None:
        super().__init__(message, status.HTTP_409_CONFLICT)


class StorageUnavailable(ServiceError):
    def __init__(self, message: str = "Storage is unavailable, try again later") -> None:
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)


class AuditWriteFailed(ServiceError):
    """Audit row could not be written. Logged by the audit logger, never surfaced to callers."""

    def __init__(self, message: str = "Audit record could not be written") -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)
