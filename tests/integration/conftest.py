from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  (registers every table on SQLModel.metadata)
from src.depends import get_session
from src.domain.account import Account, AccountStatus
from src.domain.contract import Contract, ContractStatus


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine on a throwaway SQLite file"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path / 'billing_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def app(db_session):
    """API app whose session dependency is bound to the test session"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    return app


@pytest_asyncio.fixture
async def client(app):
    """Create test client; ASGITransport skips the lifespan, so no workers run"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def seed(db_session):
    """Insert accounts and contracts, committing once"""

    async def _seed(*entities):
        db_session.add_all(entities)
        await db_session.commit()
        return entities

    return _seed


@pytest.fixture
def make_account():
    return account


@pytest.fixture
def make_contract():
    return contract


def account(account_id, name, parent_id=None, **overrides):
    fields = dict(
        id=account_id,
        parent_account_id=parent_id,
        account_name=name,
        status=AccountStatus.ACTIVE,
        currency="USD",
        payment_terms_days=30,
    )
    fields.update(overrides)
    return Account(**fields)


def contract(contract_id, account_id, **overrides):
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
