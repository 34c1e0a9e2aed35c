"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.invoice import Invoice
from src.domain.invoice_item import InvoiceItem


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Invoices are created with their items and never updated here.
    """

    @abstractmethod
    async def create_with_items(self, invoice: Invoice, items: List[InvoiceItem]) -> Invoice:
        """
        Stage an invoice and its line items in the current transaction

        Args:
            invoice: Invoice entity to persist
            items: Line items (invoice_id is assigned here)

        Returns:
            Created Invoice

        Raises:
            IntegrityError: If invoice_number already exists
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_items(self, invoice_id: str) -> List[InvoiceItem]:
        """
        Retrieve line items of an invoice

        Args:
            invoice_id: Invoice ID

        Returns:
            List of InvoiceItem
        """
        pass

    @abstractmethod
    async def get_by_invoice_number(self, invoice_number: str) -> Optional[Invoice]:
        """
        Retrieve invoice by invoice number

        Args:
            invoice_number: Unique invoice number

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def next_invoice_number(self, year: int) -> str:
        """
        Claim the next invoice number for a year

        Format: INV-YYYY-NNNNNN (e.g., INV-2026-000001). The claim belongs to
        the current transaction and is released if it rolls back.

        Args:
            year: Calendar year of the issue date

        Returns:
            Invoice number string
        """
        pass
