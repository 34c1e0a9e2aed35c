"""SQLAlchemy Contract Share Repository Implementation"""

from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.contract_share_repository import ContractShareRepository
from src.domain.contract_share import ContractShare


class SqlAlchemyContractShareRepository(ContractShareRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, contract_id: str, account_id: str) -> Optional[ContractShare]:
        statement = (
            select(ContractShare)
            .where(ContractShare.contract_id == contract_id)
            .where(ContractShare.account_id == account_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_contract_id(self, contract_id: str) -> List[ContractShare]:
        statement = (
            select(ContractShare)
            .where(ContractShare.contract_id == contract_id)
            .order_by(ContractShare.created_at)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def create(self, share: ContractShare) -> ContractShare:
        self.session.add(share)
        await self.session.flush()
        await self.session.refresh(share)
        return share

    async def delete(self, share: ContractShare) -> None:
        await self.session.delete(share)
        await self.session.flush()
