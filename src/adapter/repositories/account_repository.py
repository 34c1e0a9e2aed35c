"""SQLAlchemy Account Repository Implementation"""

from typing import Iterable, List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.account_repository import AccountRepository
from src.domain.account import Account, AccountStatus


class SqlAlchemyAccountRepository(AccountRepository):
    """
    SQLAlchemy implementation of AccountRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, account_id: str) -> Optional[Account]:
        statement = select(Account).where(Account.id == account_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_ids(self, account_ids: Iterable[str]) -> List[Account]:
        ids = list(account_ids)
        if not ids:
            return []
        statement = select(Account).where(Account.id.in_(ids))
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_active_children(self, parent_account_ids: Iterable[str]) -> List[Account]:
        """
        Direct children of the given accounts, skipping inactive and soft-deleted ones

        Args:
            parent_account_ids: Parent account identifiers

        Returns:
            Child accounts ordered by creation time
        """
        ids = list(parent_account_ids)
        if not ids:
            return []
        statement = (
            select(Account)
            .where(Account.parent_account_id.in_(ids))
            .where(Account.status == AccountStatus.ACTIVE)
            .where(Account.deleted_at.is_(None))
            .order_by(Account.created_at)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
