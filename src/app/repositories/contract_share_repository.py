"""Contract Share Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.contract_share import ContractShare


class ContractShareRepository(ABC):
    """
    Repository interface for ContractShare persistence

    (contract_id, account_id) is unique; create() raises IntegrityError on duplicates.
    """

    @abstractmethod
    async def get(self, contract_id: str, account_id: str) -> Optional[ContractShare]:
        pass

    @abstractmethod
    async def get_by_contract_id(self, contract_id: str) -> List[ContractShare]:
        pass

    @abstractmethod
    async def create(self, share: ContractShare) -> ContractShare:
        pass

    @abstractmethod
    async def delete(self, share: ContractShare) -> None:
        pass
