"""Account Repository Interface

Defines the contract for account read access.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from src.domain.account import Account


class AccountRepository(ABC):
    """
    Repository interface for Account reads

    The billing core never mutates accounts.
    """

    @abstractmethod
    async def get_by_id(self, account_id: str) -> Optional[Account]:
        """
        Retrieve account by ID

        Args:
            account_id: Account identifier

        Returns:
            Account if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_ids(self, account_ids: Iterable[str]) -> List[Account]:
        """
        Retrieve several accounts at once

        Args:
            account_ids: Account identifiers

        Returns:
            Accounts found (missing ids are ignored)
        """
        pass

    @abstractmethod
    async def get_active_children(self, parent_account_ids: Iterable[str]) -> List[Account]:
        """
        Retrieve the direct, active, non-deleted children of the given accounts

        Args:
            parent_account_ids: Parent account identifiers

        Returns:
            Child accounts
        """
        pass
