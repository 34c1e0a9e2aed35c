"""Billing period and proration calculations

Pure functions over dates and Decimal amounts. No I/O.
"""

import calendar
import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from src.domain.contract import BillingFrequency

logger = logging.getLogger(__name__)

FREQUENCY_MONTHS = {
    BillingFrequency.MONTHLY.value: 1,
    BillingFrequency.QUARTERLY.value: 3,
    BillingFrequency.ANNUAL.value: 12,
}

PERIODS_PER_YEAR = {
    BillingFrequency.MONTHLY.value: Decimal(12),
    BillingFrequency.QUARTERLY.value: Decimal(4),
    BillingFrequency.ANNUAL.value: Decimal(1),
}


def _frequency_value(frequency) -> str:
    return frequency.value if isinstance(frequency, BillingFrequency) else str(frequency)


def add_months(start: date, months: int) -> date:
    """Advance by whole months, clamping to the last day of the target month"""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def billing_period(
    frequency,
    explicit_start: Optional[date] = None,
    explicit_end: Optional[date] = None,
    today: Optional[date] = None,
) -> Tuple[date, date]:
    """
    Compute the billing window for a contract

    Both explicit bounds are used verbatim. Otherwise the window starts at
    explicit_start (or today) and runs for one billing interval.
    Unknown frequencies bill monthly.
    """
    if explicit_start is not None and explicit_end is not None:
        return explicit_start, explicit_end

    start = explicit_start or today or date.today()
    value = _frequency_value(frequency)
    months = FREQUENCY_MONTHS.get(value)
    if months is None:
        logger.warning(f"Unknown billing frequency '{value}', falling back to monthly")
        months = 1

    return start, add_months(start, months)


def period_amount(contract_value: Decimal, frequency) -> Decimal:
    """Portion of the annual contract value billed per period (exact division)"""
    value = Decimal(contract_value)
    divisor = PERIODS_PER_YEAR.get(_frequency_value(frequency), Decimal(12))
    return value / divisor


def prorate(full_amount: Decimal, total_days: int, used_days: int) -> Decimal:
    """Scale a full-period amount by used_days / total_days"""
    if total_days <= 0 or used_days <= 0:
        return Decimal(0)
    return Decimal(full_amount) * used_days / total_days
