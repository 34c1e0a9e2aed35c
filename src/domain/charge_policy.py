"""Charge-type billing policy

Decides whether a product is billed in a given period and whether its
setup fee applies. A missing product behaves as recurring.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, List, Optional

from src.domain.product import ChargeType, Product


@dataclass(frozen=True)
class BillableProduct:
    """Product fields the billing engine needs"""

    charge_type: str = ChargeType.RECURRING.value
    setup_fee: Optional[Decimal] = None
    trial_period_days: Optional[int] = None
    volume_tiers: Optional[List[Any]] = field(default=None, compare=False)

    @classmethod
    def from_product(cls, product: Product) -> "BillableProduct":
        return cls(
            charge_type=product.charge_type,
            setup_fee=product.setup_fee,
            trial_period_days=product.trial_period_days,
            volume_tiers=product.volume_tiers,
        )


def is_first_billing_period(contract_start: date, period_start: date) -> bool:
    """Same calendar year and month; day of month is ignored"""
    return (
        contract_start.year == period_start.year
        and contract_start.month == period_start.month
    )


def in_trial(product: BillableProduct, contract_start: date, period_start: date) -> bool:
    trial_days = product.trial_period_days or 0
    if trial_days <= 0:
        return False
    return period_start < contract_start + timedelta(days=trial_days)


def should_bill(
    product: Optional[BillableProduct],
    contract_start: date,
    period_start: date,
) -> bool:
    """
    Rules:
     - no product        -> bill (recurring)
     - usage_based       -> never billed here
     - trial active      -> skip, whatever the charge type
     - one_time          -> first billing period only
     - recurring         -> bill
    """
    if product is None:
        return True

    if product.charge_type == ChargeType.USAGE_BASED:
        return False

    if in_trial(product, contract_start, period_start):
        return False

    if product.charge_type == ChargeType.ONE_TIME:
        return is_first_billing_period(contract_start, period_start)

    return True


def setup_fee(
    product: Optional[BillableProduct],
    contract_start: date,
    period_start: date,
) -> Decimal:
    """Setup fee for the first billing period, zero otherwise"""
    if product is None or not product.setup_fee:
        return Decimal(0)
    if is_first_billing_period(contract_start, period_start):
        return Decimal(product.setup_fee)
    return Decimal(0)
