"""Contract Domain Entity

Commercial agreement owned by exactly one account. Either a fixed
contract_value or seat-based pricing (seat_count x seat_price).
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Date, ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid


class ContractStatus(str, Enum):
    """Contract status types"""
    DRAFT = "draft"
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class BillingFrequency(str, Enum):
    """How often a contract is invoiced"""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


class Contract(BaseModel, table=True):
    """
    Contract - Billable agreement between the platform and an account

    Domain Rules:
    - Only contracts with status=active are billed
    - Seat-based pricing applies when both seat_count and seat_price are set
    - billing_frequency is stored as text; unknown values bill monthly
    """

    __tablename__ = "contracts"
    __table_args__ = (
        Index('ix_contracts_account_id', 'account_id'),
        Index('ix_contracts_status', 'status'),
        Index('ix_contracts_end_date', 'end_date'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Contract identifier (UUID)"
    )

    contract_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Human-readable contract number (e.g., CON-2026-001)"
    )

    account_id: str = Field(
        sa_column=Column(String(36), ForeignKey("accounts.id"), nullable=False),
        description="Owning account"
    )

    start_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Contract start date"
    )

    end_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Contract end date"
    )

    contract_value: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Total annual contract value"
    )

    billing_frequency: str = Field(
        default=BillingFrequency.ANNUAL.value,
        sa_column=Column(String(20), nullable=False, default=BillingFrequency.ANNUAL.value),
        description="Billing frequency (monthly, quarterly, annual)"
    )

    seat_count: Optional[int] = Field(
        default=None,
        description="Licensed seats (seat-based contracts only)"
    )

    seat_price: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(10, 2), nullable=True),
        description="Price per seat per billing period"
    )

    status: ContractStatus = Field(
        default=ContractStatus.ACTIVE,
        description="Contract status (draft, active, expired, cancelled)"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Contract creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )
