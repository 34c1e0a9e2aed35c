"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import List, Optional
from sqlalchemy import update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import Invoice
from src.domain.invoice_item import InvoiceItem
from src.domain.invoice_sequence import InvoiceSequence, format_invoice_number


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Uses async session for database operations. Nothing is committed here;
    the caller's unit of work commits invoice and items together.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_with_items(self, invoice: Invoice, items: List[InvoiceItem]) -> Invoice:
        """
        Stage an invoice and its line items in the current transaction

        Args:
            invoice: Invoice entity to persist
            items: Line items (invoice_id is assigned here)

        Returns:
            Created Invoice
        """
        self.session.add(invoice)
        await self.session.flush()

        for item in items:
            item.invoice_id = invoice.id
        self.session.add_all(items)
        await self.session.flush()

        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        statement = select(Invoice).where(Invoice.id == invoice_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_items(self, invoice_id: str) -> List[InvoiceItem]:
        statement = (
            select(InvoiceItem)
            .where(InvoiceItem.invoice_id == invoice_id)
            .order_by(InvoiceItem.created_at)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_by_invoice_number(self, invoice_number: str) -> Optional[Invoice]:
        statement = select(Invoice).where(Invoice.invoice_number == invoice_number)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def next_invoice_number(self, year: int) -> str:
        """
        Claim the next invoice number for a year

        The sequence row is created on first use and incremented with
        UPDATE ... RETURNING, which holds the row lock until commit.

        Args:
            year: Calendar year of the issue date

        Returns:
            Invoice number string (INV-YYYY-NNNNNN)
        """
        insert = self._dialect_insert()
        await self.session.execute(
            insert(InvoiceSequence)
            .values(year=year, last_value=0)
            .on_conflict_do_nothing(index_elements=["year"])
        )

        statement = (
            update(InvoiceSequence)
            .where(InvoiceSequence.year == year)
            .values(last_value=InvoiceSequence.last_value + 1)
            .returning(InvoiceSequence.last_value)
        )
        result = await self.session.execute(statement)
        sequence = result.scalar_one()

        return format_invoice_number(year, sequence)

    def _dialect_insert(self):
        if self.session.bind.dialect.name == "postgresql":
            return postgresql_insert
        return sqlite_insert
