"""Invoice Sequence Domain Entity

Per-year counter backing invoice numbers. Incremented with an atomic
UPDATE ... RETURNING inside the invoice transaction, so the row stays
locked until the invoice commits.
"""

from sqlmodel import Field
from src.domain.base import BaseModel


class InvoiceSequence(BaseModel, table=True):
    __tablename__ = "invoice_sequences"

    year: int = Field(primary_key=True)
    last_value: int = Field(default=0)


def format_invoice_number(year: int, sequence: int) -> str:
    """INV-YYYY-NNNNNN"""
    return f"INV-{year}-{sequence:06d}"
