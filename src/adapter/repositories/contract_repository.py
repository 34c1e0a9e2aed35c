"""SQLAlchemy Contract Repository Implementation"""

from datetime import date
from typing import Iterable, List, Optional
from sqlalchemy import or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.contract_repository import ContractRepository
from src.domain.contract import Contract, ContractStatus
from src.domain.contract_share import ContractShare


class SqlAlchemyContractRepository(ContractRepository):
    """
    SQLAlchemy implementation of ContractRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, contract_id: str) -> Optional[Contract]:
        statement = select(Contract).where(Contract.id == contract_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_billable_for_accounts(
        self,
        account_ids: Iterable[str],
        period_start: date,
        period_end: date,
    ) -> List[Contract]:
        """
        Active contracts owned by or shared with the accounts, overlapping the period

        Args:
            account_ids: Owning or share-target accounts
            period_start: Billing period start
            period_end: Billing period end

        Returns:
            Distinct contracts ordered by contract number
        """
        ids = list(account_ids)
        if not ids:
            return []

        shared_contract_ids = (
            select(ContractShare.contract_id)
            .where(ContractShare.account_id.in_(ids))
        )

        statement = (
            select(Contract)
            .where(
                or_(
                    Contract.account_id.in_(ids),
                    Contract.id.in_(shared_contract_ids),
                )
            )
            .where(Contract.status == ContractStatus.ACTIVE)
            .where(Contract.start_date <= period_end)
            .where(Contract.end_date >= period_start)
            .order_by(Contract.contract_number)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
