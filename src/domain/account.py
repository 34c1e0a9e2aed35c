"""Account Domain Entity

Billing account, optionally part of an ownership hierarchy through
parent_account_id. Read-only to the billing core.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Boolean, ForeignKey, String
from src.domain.base import BaseModel, generate_uuid


class AccountStatus(str, Enum):
    """Account status types"""
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class Account(BaseModel, table=True):
    """
    Account - Customer billed for one or more contracts

    Domain Rules:
    - parent_account_id forms a tree (traversal capped by MAX_ACCOUNT_DEPTH)
    - Accounts on credit_hold cannot receive consolidated invoices
    - deleted_at marks soft-deleted accounts, which are never billed
    """

    __tablename__ = "accounts"
    __table_args__ = (
        Index('ix_accounts_parent_account_id', 'parent_account_id'),
        Index('ix_accounts_status', 'status'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Account identifier (UUID)"
    )

    parent_account_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(36), ForeignKey("accounts.id"), nullable=True),
        description="Parent account in the hierarchy (None = top level)"
    )

    account_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Display name used on invoice line items"
    )

    status: AccountStatus = Field(
        default=AccountStatus.ACTIVE,
        description="Account status (active, inactive, suspended)"
    )

    credit_hold: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
        description="Blocks consolidated invoicing when set"
    )

    currency: str = Field(
        default="USD",
        sa_column=Column(String(3), nullable=False, default="USD"),
        description="Currency code (ISO 4217)"
    )

    payment_terms_days: int = Field(
        default=30,
        description="Days between invoice issue date and due date"
    )

    deleted_at: Optional[datetime] = Field(
        default=None,
        description="Soft-delete timestamp"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Account creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )
