"""Contract Share Domain Entity

Grants a non-owning account visibility of a contract for consolidated billing.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from src.domain.base import BaseModel, generate_uuid


class ContractShare(BaseModel, table=True):
    """
    Contract Share - Join of Contract x Account

    Domain Rules:
    - One share per (contract_id, account_id) pair
    - The owning account can never be a share target
    - Sharing does not transfer ownership
    """

    __tablename__ = "contract_shares"
    __table_args__ = (
        UniqueConstraint('contract_id', 'account_id', name='uq_contract_shares_contract_account'),
        Index('ix_contract_shares_account_id', 'account_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    contract_id: str = Field(
        sa_column=Column(String(36), ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False),
        description="Shared contract"
    )

    account_id: str = Field(
        sa_column=Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False),
        description="Account granted access to the contract"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
    )
