"""Seat-based pricing with optional volume tiers"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional, Union


@dataclass(frozen=True)
class VolumeTier:
    """Seat range [min_seats, max_seats] priced at price_per_seat (max_seats=None is unbounded)"""

    min_seats: int
    max_seats: Optional[int]
    price_per_seat: Decimal

    def contains(self, seat_count: int) -> bool:
        if seat_count < self.min_seats:
            return False
        return self.max_seats is None or seat_count <= self.max_seats

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "VolumeTier":
        max_seats = raw.get("max_seats", raw.get("maxSeats"))
        return cls(
            min_seats=int(raw.get("min_seats", raw.get("minSeats", 0))),
            max_seats=None if max_seats is None else int(max_seats),
            price_per_seat=Decimal(str(raw.get("price_per_seat", raw.get("pricePerSeat")))),
        )


@dataclass(frozen=True)
class SeatPricing:
    seat_count: int
    unit_price: Decimal
    subtotal: Decimal
    applied_tier: Optional[VolumeTier] = None


TierInput = Union[VolumeTier, Mapping[str, Any]]


def _normalize_tiers(tiers: Iterable[TierInput]) -> List[VolumeTier]:
    return [
        tier if isinstance(tier, VolumeTier) else VolumeTier.from_dict(tier)
        for tier in tiers
    ]


def find_applicable_tier(seat_count: int, tiers: Iterable[TierInput]) -> Optional[VolumeTier]:
    """
    First tier, in ascending min_seats order, whose range contains seat_count

    Tier ranges are expected not to overlap.
    """
    for tier in sorted(_normalize_tiers(tiers), key=lambda t: t.min_seats):
        if tier.contains(seat_count):
            return tier
    return None


def price_seats(
    seat_count: int,
    base_price: Decimal,
    tiers: Optional[Iterable[TierInput]] = None,
) -> SeatPricing:
    """Unit price and subtotal for seat_count seats; falls back to base_price when no tier matches"""
    base_price = Decimal(base_price)
    applied_tier = find_applicable_tier(seat_count, tiers) if tiers else None

    unit_price = applied_tier.price_per_seat if applied_tier else base_price
    return SeatPricing(
        seat_count=seat_count,
        unit_price=unit_price,
        subtotal=Decimal(seat_count) * unit_price,
        applied_tier=applied_tier,
    )
