from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from app.api.v1.accounts.schemas import AccountResponse
from app.api.v1.transactions.schemas import TransactionResponse
from app.auth.schemas import UserInfo


class DailyNet(BaseModel):
    day: date
    label: str  # e.g. "Mar 29"
    net: Decimal


class DashboardResponse(BaseModel):
    user: UserInfo
    account: Optional[AccountResponse] = None
    recent_transactions: List[TransactionResponse]
    pending_count: int
    daily_net: List[DailyNet]
