"""Invoice Domain Entity

Invoices produced by the billing engine. Created together with their items
in one transaction and never updated by the billing core.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Boolean, Date, ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    DRAFT = "draft"
    ISSUED = "issued"
    PAID = "paid"
    CANCELLED = "cancelled"


class BillingType(str, Enum):
    """How the invoice was produced"""
    RECURRING = "recurring"
    ONE_TIME = "one_time"


class Invoice(BaseModel, table=True):
    """
    Invoice - Billing document for a contract or an account hierarchy

    Domain Rules:
    - invoice_number must be unique (INV-YYYY-NNNNNN)
    - total = subtotal + tax - discount
    - consolidated invoices belong to the parent account and have no contract_id
    - Invoice and its items are written atomically
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_account_id', 'account_id'),
        Index('ix_invoices_contract_id', 'contract_id'),
        Index('ix_invoices_status', 'status'),
        Index('ix_invoices_due_date', 'due_date'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique invoice number (e.g., INV-2026-000001)"
    )

    account_id: str = Field(
        sa_column=Column(String(36), ForeignKey("accounts.id"), nullable=False),
        description="Billed account"
    )

    contract_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(36), ForeignKey("contracts.id", ondelete="SET NULL"), nullable=True),
        description="Source contract (None for consolidated invoices)"
    )

    issue_date: date = Field(
        sa_column=Column(Date, nullable=False),
    )

    due_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="issue_date + account payment terms"
    )

    period_start: date = Field(
        sa_column=Column(Date, nullable=False),
    )

    period_end: date = Field(
        sa_column=Column(Date, nullable=False),
    )

    subtotal: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
    )

    tax: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
    )

    discount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
    )

    total: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
    )

    currency: str = Field(
        default="USD",
        sa_column=Column(String(3), nullable=False),
        description="Currency code (ISO 4217)"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.DRAFT,
        description="Invoice status (draft, issued, paid, cancelled)"
    )

    billing_type: BillingType = Field(
        default=BillingType.RECURRING,
    )

    consolidated: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
        description="True when aggregated over an account hierarchy"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
    )
