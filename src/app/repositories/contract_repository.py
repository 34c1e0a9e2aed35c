"""Contract Repository Interface

Defines the contract for contract read access.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, List, Optional
from src.domain.contract import Contract


class ContractRepository(ABC):
    """Repository interface for Contract reads"""

    @abstractmethod
    async def get_by_id(self, contract_id: str) -> Optional[Contract]:
        """
        Retrieve contract by ID

        Args:
            contract_id: Contract identifier

        Returns:
            Contract if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_billable_for_accounts(
        self,
        account_ids: Iterable[str],
        period_start: date,
        period_end: date,
    ) -> List[Contract]:
        """
        Retrieve active contracts owned by or shared with any of the accounts
        whose term overlaps [period_start, period_end]

        Args:
            account_ids: Owning or share-target accounts
            period_start: Billing period start
            period_end: Billing period end

        Returns:
            Distinct contracts
        """
        pass
