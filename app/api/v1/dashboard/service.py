"""Dashboard: balance, recent activity and the 7-day net chart series."""

from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.accounts.schemas import AccountResponse
from app.api.v1.transactions.schemas import TransactionResponse
from app.auth.models import User
from app.auth.rbac import has_permission
from app.auth.schemas import UserInfo
from app.core.enums import TransactionStatus
from app.core.exceptions import NotFound
from app.core.models import Transaction
from app.ledger import LedgerStore, TransactionFilter, balance_delta

from .schemas import DailyNet, DashboardResponse

RECENT_LIMIT = 5
CHART_DAYS = 7


def daily_net_series(
    transactions: Iterable[Transaction],
    today: date,
    days: int = CHART_DAYS,
) -> List[DailyNet]:
    """
    Net amount per calendar day for the last ``days`` days, oldest first.
    Payments count positive, fees and fines negative, regardless of status.
    """
    first_day = today - timedelta(days=days - 1)
    totals: Dict[date, Decimal] = defaultdict(lambda: Decimal("0.00"))
    for t in transactions:
        day = t.created_at.date()
        if first_day <= day <= today:
            totals[day] += balance_delta(t.kind, Decimal(t.amount))
    series = []
    for offset in range(days):
        day = first_day + timedelta(days=offset)
        series.append(DailyNet(day=day, label=day.strftime("%b %d"), net=totals[day]))
    return series


async def get_dashboard(
    db: AsyncSession,
    user_id: UUID,
    today: Optional[date] = None,
) -> DashboardResponse:
    user = await db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    today = today or datetime.utcnow().date()
    store = LedgerStore(db)

    account = await store.get_account(user_id)
    recent = await store.list_transactions(TransactionFilter(owner_id=user_id, limit=RECENT_LIMIT))

    # Reviewers see the whole queue and the portal-wide chart; students only their own
    sees_all = has_permission(user.role, "transactions", "read_all")
    pending_stmt = select(func.count(Transaction.id)).where(
        Transaction.status == TransactionStatus.PENDING.value
    )
    chart_stmt = select(Transaction).where(
        Transaction.created_at >= datetime.combine(today - timedelta(days=CHART_DAYS - 1), datetime.min.time())
    )
    if not sees_all:
        pending_stmt = pending_stmt.where(Transaction.owner_id == user_id)
        chart_stmt = chart_stmt.where(Transaction.owner_id == user_id)
    pending_count = (await db.execute(pending_stmt)).scalar_one()
    chart_rows = (await db.execute(chart_stmt)).scalars().all()

    return DashboardResponse(
        user=UserInfo.model_validate(user),
        account=AccountResponse.model_validate(account) if account else None,
        recent_transactions=[TransactionResponse.model_validate(t) for t in recent],
        pending_count=pending_count,
        daily_net=daily_net_series(chart_rows, today),
    )
