"""Product Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.charge_policy import BillableProduct
from src.domain.contract import Contract


class ProductRepository(ABC):
    """Resolves the product billed by a contract"""

    @abstractmethod
    async def get_billable_product(self, contract: Contract) -> Optional[BillableProduct]:
        """
        Resolve the product behind a contract

        Args:
            contract: Contract being billed

        Returns:
            BillableProduct, or None when the contract has no linked product
            (billed as recurring)
        """
        pass
