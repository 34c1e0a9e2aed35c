"""Invoice Item Domain Entity

Individual line item within an invoice.
"""

from datetime import datetime
from decimal import Decimal
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class InvoiceItem(BaseModel, table=True):
    """
    Invoice Item - Line item within an invoice

    Domain Rules:
    - Each item belongs to exactly one invoice
    - amount = quantity * unit_price (rounded to cents)
    """

    __tablename__ = "invoice_items"
    __table_args__ = (
        Index('ix_invoice_items_invoice_id', 'invoice_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    invoice_id: str = Field(
        sa_column=Column(String(36), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
    )

    description: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Line item description (e.g., 'Quarterly Subscription - 50 seats')"
    )

    quantity: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
    )
