from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from app.api.v1.dashboard.service import daily_net_series
from app.auth.rbac import has_permission
from app.auth.security import create_access_token, decode_access_token, hash_password, verify_password
from app.core.enums import TransactionStatus
from app.core.exceptions import Forbidden, InvalidAmount, InvalidTransition
from app.core.models import Transaction
from app.ledger import balance_delta, validate_transition


def _txn(status: str = "pending", amount: str = "10.00", kind: str = "payment", created_at=None) -> Transaction:
    return Transaction(
        id=uuid4(),
        owner_id=uuid4(),
        kind=kind,
        amount=Decimal(amount),
        description="test",
        status=status,
        created_at=created_at or datetime(2025, 3, 29, 10, 0),
    )


@pytest.mark.parametrize("role", ["admin", "staff"])
@pytest.mark.parametrize("target", [TransactionStatus.APPROVED, TransactionStatus.REJECTED])
def test_reviewers_may_move_pending(role, target) -> None:
    validate_transition(_txn(), target, role)


def test_student_is_forbidden() -> None:
    with pytest.raises(Forbidden):
        validate_transition(_txn(), TransactionStatus.APPROVED, "student")


@pytest.mark.parametrize("status", ["approved", "rejected"])
def test_terminal_transactions_cannot_move(status) -> None:
    with pytest.raises(InvalidTransition):
        validate_transition(_txn(status=status), TransactionStatus.APPROVED, "admin")


def test_cannot_move_back_to_pending() -> None:
    with pytest.raises(InvalidTransition):
        validate_transition(_txn(), TransactionStatus.PENDING, "admin")


def test_state_is_checked_before_role() -> None:
    with pytest.raises(InvalidTransition):
        validate_transition(_txn(status="approved"), TransactionStatus.REJECTED, "student")


@pytest.mark.parametrize("amount", ["0.00", "-1.00"])
def test_non_positive_amount_is_rejected(amount) -> None:
    with pytest.raises(InvalidAmount):
        validate_transition(_txn(amount=amount), TransactionStatus.APPROVED, "staff")


def test_balance_delta_sign() -> None:
    assert balance_delta("payment", Decimal("12.50")) == Decimal("12.50")
    assert balance_delta("fee", Decimal("12.50")) == Decimal("-12.50")
    assert balance_delta("fine", Decimal("3.00")) == Decimal("-3.00")


def test_role_capabilities() -> None:
    assert has_permission("admin", "audit", "read")
    assert not has_permission("staff", "audit", "read")
    assert has_permission("staff", "transactions", "review")
    assert not has_permission("student", "transactions", "review")
    assert has_permission("student", "transactions", "create")
    assert not has_permission("student", "transactions", "create_any")
    assert not has_permission("unknown", "transactions", "create")


def test_daily_net_series_buckets_last_seven_days() -> None:
    today = date(2025, 3, 29)
    rows = [
        _txn(kind="payment", amount="100.00", created_at=datetime(2025, 3, 29, 8, 0)),
        _txn(kind="fee", amount="30.00", created_at=datetime(2025, 3, 29, 17, 30)),
        _txn(kind="fine", amount="5.00", status="rejected", created_at=datetime(2025, 3, 24, 9, 0)),
        _txn(kind="payment", amount="999.00", created_at=datetime(2025, 3, 22, 23, 59)),  # outside window
    ]

    series = daily_net_series(rows, today)

    assert [p.day for p in series][0] == date(2025, 3, 23)
    assert [p.day for p in series][-1] == today
    assert len(series) == 7
    assert series[-1].net == Decimal("70.00")
    assert series[-1].label == "Mar 29"
    assert series[1].net == Decimal("-5.00")
    assert sum(p.net for p in series) == Decimal("65.00")


def test_access_token_carries_user_id_until_expiry() -> None:
    user_id = uuid4()
    assert decode_access_token(create_access_token(user_id, "student")) == user_id

    expired = create_access_token(user_id, "student", expires_minutes=-1)
    assert decode_access_token(expired) is None
    assert decode_access_token("not-a-token") is None


def test_password_hash_verifies_only_the_original() -> None:
    hashed = hash_password("StrongPass123")
    assert verify_password("StrongPass123", hashed)
    assert not verify_password("strongpass123", hashed)
    assert not verify_password("StrongPass123", "not-a-bcrypt-hash")
