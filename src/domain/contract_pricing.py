"""Contract pricing shared by single and consolidated invoicing

Seat-based when both seat_count and seat_price are set, otherwise the
period share of the fixed contract value.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from src.domain.billing_period import period_amount
from src.domain.contract import Contract
from src.domain.seat_pricing import TierInput, price_seats

CENT = Decimal("0.01")


def to_cents(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def frequency_label(frequency: str) -> str:
    """'quarterly' -> 'Quarterly'"""
    frequency = str(frequency)
    return frequency[:1].upper() + frequency[1:]


def is_seat_based(contract: Contract) -> bool:
    return bool(contract.seat_count) and bool(contract.seat_price)


@dataclass(frozen=True)
class ContractCharge:
    quantity: Decimal
    unit_price: Decimal
    amount: Decimal
    seat_based: bool


def price_contract(
    contract: Contract,
    volume_tiers: Optional[Iterable[TierInput]] = None,
) -> ContractCharge:
    """Price one billing period of a contract, rounded to cents"""
    if is_seat_based(contract):
        pricing = price_seats(contract.seat_count, contract.seat_price, volume_tiers)
        return ContractCharge(
            quantity=Decimal(contract.seat_count),
            unit_price=to_cents(pricing.unit_price),
            amount=to_cents(pricing.subtotal),
            seat_based=True,
        )

    amount = to_cents(period_amount(contract.contract_value, contract.billing_frequency))
    return ContractCharge(
        quantity=Decimal(1),
        unit_price=amount,
        amount=amount,
        seat_based=False,
    )
