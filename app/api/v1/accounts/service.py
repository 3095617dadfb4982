from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFound
from app.ledger import LedgerStore

from .schemas import AccountResponse


async def get_account(db: AsyncSession, owner_id: UUID) -> AccountResponse:
    account = await LedgerStore(db).get_account(owner_id)
    if account is None:
        raise NotFound("Account not found")
    return AccountResponse.model_validate(account)
