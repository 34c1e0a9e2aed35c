"""SQLAlchemy Product Repository Implementation"""

from typing import Optional
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.product_repository import ProductRepository
from src.domain.charge_policy import BillableProduct
from src.domain.contract import Contract


class SqlAlchemyProductRepository(ProductRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_billable_product(self, contract: Contract) -> Optional[BillableProduct]:
        # TODO: resolve through contract line items once contracts reference products
        return None
