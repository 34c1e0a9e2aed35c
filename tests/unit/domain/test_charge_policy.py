"""Unit tests for the charge-type billing policy"""

import pytest
from datetime import date
from decimal import Decimal

from src.domain.charge_policy import (
    BillableProduct,
    in_trial,
    is_first_billing_period,
    setup_fee,
    should_bill,
)
from src.domain.product import ChargeType, Product

CONTRACT_START = date(2026, 1, 15)


class TestShouldBill:

    def test_no_product_is_billed(self):
        assert should_bill(None, CONTRACT_START, date(2026, 6, 1)) is True

    def test_recurring_is_billed_every_period(self):
        product = BillableProduct(charge_type=ChargeType.RECURRING.value)

        assert should_bill(product, CONTRACT_START, date(2026, 1, 15)) is True
        assert should_bill(product, CONTRACT_START, date(2026, 9, 1)) is True

    def test_usage_based_is_never_billed(self):
        product = BillableProduct(charge_type=ChargeType.USAGE_BASED.value)

        assert should_bill(product, CONTRACT_START, date(2026, 1, 15)) is False

    def test_one_time_only_in_first_period(self):
        product = BillableProduct(charge_type=ChargeType.ONE_TIME.value)

        assert should_bill(product, CONTRACT_START, date(2026, 1, 31)) is True
        assert should_bill(product, CONTRACT_START, date(2026, 2, 1)) is False

    @pytest.mark.parametrize("charge_type", [ChargeType.RECURRING, ChargeType.ONE_TIME])
    def test_trial_suppresses_billing(self, charge_type):
        product = BillableProduct(charge_type=charge_type.value, trial_period_days=30)

        assert should_bill(product, CONTRACT_START, date(2026, 2, 13)) is False

    def test_billing_resumes_after_trial(self):
        product = BillableProduct(charge_type=ChargeType.RECURRING.value, trial_period_days=30)

        assert should_bill(product, CONTRACT_START, date(2026, 2, 14)) is True

    def test_zero_trial_days_is_no_trial(self):
        product = BillableProduct(trial_period_days=0)

        assert in_trial(product, CONTRACT_START, CONTRACT_START) is False


class TestFirstBillingPeriod:

    def test_same_month_ignores_day(self):
        assert is_first_billing_period(date(2026, 3, 31), date(2026, 3, 1)) is True

    def test_same_month_other_year(self):
        assert is_first_billing_period(date(2026, 3, 1), date(2027, 3, 1)) is False


class TestSetupFee:

    def test_fee_in_first_period(self):
        product = BillableProduct(setup_fee=Decimal("500.00"))

        assert setup_fee(product, CONTRACT_START, date(2026, 1, 20)) == Decimal("500.00")

    def test_no_fee_after_first_period(self):
        product = BillableProduct(setup_fee=Decimal("500.00"))

        assert setup_fee(product, CONTRACT_START, date(2026, 2, 20)) == Decimal(0)

    def test_no_product_or_fee(self):
        assert setup_fee(None, CONTRACT_START, CONTRACT_START) == Decimal(0)
        assert setup_fee(BillableProduct(), CONTRACT_START, CONTRACT_START) == Decimal(0)


def test_billable_product_from_product():
    product = Product(
        name="Platform",
        charge_type=ChargeType.ONE_TIME.value,
        setup_fee=Decimal("99.00"),
        trial_period_days=14,
        volume_tiers=[{"min_seats": 1, "max_seats": None, "price_per_seat": "9"}],
    )

    billable = BillableProduct.from_product(product)

    assert billable.charge_type == "one_time"
    assert billable.setup_fee == Decimal("99.00")
    assert billable.trial_period_days == 14
    assert billable.volume_tiers == product.volume_tiers
