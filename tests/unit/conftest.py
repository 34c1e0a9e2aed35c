import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.domain.account import Account, AccountStatus
from src.domain.contract import Contract, ContractStatus


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def make_account():
    """Factory for Account entities"""

    def _make(account_id="acct_parent", name="Acme Corp", parent_id=None, **overrides):
        fields = dict(
            id=account_id,
            parent_account_id=parent_id,
            account_name=name,
            status=AccountStatus.ACTIVE,
            credit_hold=False,
            currency="USD",
            payment_terms_days=30,
        )
        fields.update(overrides)
        return Account(**fields)

    return _make


@pytest.fixture
def make_contract():
    """Factory for Contract entities"""

    def _make(contract_id="ctr_1", account_id="acct_parent", **overrides):
        fields = dict(
            id=contract_id,
            contract_number=f"CTR-{contract_id}",
            account_id=account_id,
            start_date=date(2026, 1, 1),
            end_date=date(2026, 12, 31),
            contract_value=Decimal("12000.00"),
            billing_frequency="monthly",
            status=ContractStatus.ACTIVE,
        )
        fields.update(overrides)
        return Contract(**fields)

    return _make
