"""Product Domain Entity

Catalog product with a charge type that drives billing timing rules.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import JSON, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class ChargeType(str, Enum):
    """Billing cadence of a product"""
    RECURRING = "recurring"        # Billed every period
    ONE_TIME = "one_time"          # Billed in the first billing period only
    USAGE_BASED = "usage_based"    # Metered billing (not billed by the contract engine)


class Product(BaseModel, table=True):
    """
    Product - Sellable catalog item

    Domain Rules:
    - charge_type defaults to recurring
    - setup_fee is charged once, in the first billing period
    - trial_period_days suppresses billing from the contract start
    - volume_tiers is a list of {min_seats, max_seats, price_per_seat}
    """

    __tablename__ = "products"
    __table_args__ = (
        Index('ix_products_charge_type', 'charge_type'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    charge_type: str = Field(
        default=ChargeType.RECURRING.value,
        sa_column=Column(String(20), nullable=False, default=ChargeType.RECURRING.value),
        description="Charge type (recurring, one_time, usage_based)"
    )

    setup_fee: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(10, 2), nullable=True),
        description="One-time setup fee billed with the first invoice"
    )

    trial_period_days: Optional[int] = Field(
        default=None,
        description="Days after contract start during which nothing is billed"
    )

    volume_tiers: Optional[List[Any]] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Seat-count price tiers"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
    )
