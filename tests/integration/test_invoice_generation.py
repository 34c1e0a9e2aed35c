"""Integration tests for invoice generation against SQLite

Tests cover:
- Invoice and items persisted together
- Per-year sequential invoice numbers across sessions, also when concurrent
- Consolidated invoices over owned and shared contracts
- Queue -> worker -> use case round trip
"""

import asyncio
import pytest
from datetime import date, datetime
from decimal import Decimal

from src.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from src.adapter.repositories.contract_repository import SqlAlchemyContractRepository
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.adapter.services.in_memory_job_queue import InMemoryJobQueue
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.billing import (
    ConsolidatedInvoiceCommandDTO,
    GenerateConsolidatedInvoice,
    GenerateContractInvoice,
    GenerateInvoiceCommandDTO,
    QueueBillingJob,
)
from src.domain.account import AccountStatus
from src.domain.billing_job import JobState, JobType, QueueName
from src.domain.contract import ContractStatus
from src.domain.contract_share import ContractShare
from src.worker.billing_worker import BillingWorker
from src.worker.contract_billing_processor import ContractBillingProcessor


def contract_invoice_use_case(session):
    return GenerateContractInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        contract_repo=SqlAlchemyContractRepository(session),
        account_repo=SqlAlchemyAccountRepository(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        product_repo=SqlAlchemyProductRepository(session),
    )


def consolidated_use_case(session, max_depth=5):
    return GenerateConsolidatedInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        account_repo=SqlAlchemyAccountRepository(session),
        contract_repo=SqlAlchemyContractRepository(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        max_depth=max_depth,
    )


class TestContractInvoicePersistence:

    @pytest.mark.asyncio
    async def test_invoice_and_items_are_persisted(self, db_session, seed, make_account, make_contract):
        # Arrange
        await seed(
            make_account("acct_1", "Acme Corp"),
            make_contract(
                "ctr_1", "acct_1",
                billing_frequency="quarterly",
                seat_count=50,
                seat_price=Decimal("600.00"),
            ),
        )

        # Act
        result = await contract_invoice_use_case(db_session).execute(
            GenerateInvoiceCommandDTO(contract_id="ctr_1"), today=date(2026, 4, 1)
        )

        # Assert
        assert result.is_ok(), result.error
        assert result.value.invoice_number == "INV-2026-000001"

        invoice_repo = SqlAlchemyInvoiceRepository(db_session)
        invoice = await invoice_repo.get_by_id(result.value.invoice_id)
        items = await invoice_repo.get_items(invoice.id)
        assert invoice.total == Decimal("30000.00")
        assert invoice.contract_id == "ctr_1"
        assert invoice.due_date == date(2026, 5, 1)
        assert len(items) == 1
        assert items[0].description == "Quarterly Subscription - 50 seats"
        assert items[0].amount == Decimal("30000.00")

    @pytest.mark.asyncio
    async def test_invoice_numbers_are_sequential_per_year(
        self, session_factory, seed, make_account, make_contract
    ):
        """
        Given: Three contracts billed from separate sessions
        When: Invoices are generated in 2026, 2026 and 2027
        Then: Numbers are distinct and restart for the new year
        """
        # Arrange
        await seed(
            make_account("acct_1", "Acme Corp"),
            make_contract("ctr_1", "acct_1"),
            make_contract("ctr_2", "acct_1"),
            make_contract("ctr_3", "acct_1", end_date=date(2027, 12, 31)),
        )

        # Act
        numbers = []
        for contract_id, today in [
            ("ctr_1", date(2026, 6, 1)),
            ("ctr_2", date(2026, 6, 1)),
            ("ctr_3", date(2027, 1, 5)),
        ]:
            async with session_factory() as session:
                result = await contract_invoice_use_case(session).execute(
                    GenerateInvoiceCommandDTO(contract_id=contract_id), today=today
                )
                numbers.append(result.value.invoice_number)

        # Assert
        assert numbers == ["INV-2026-000001", "INV-2026-000002", "INV-2027-000001"]

    @pytest.mark.asyncio
    async def test_concurrent_generations_get_distinct_numbers(
        self, db_session, session_factory, seed, make_account, make_contract
    ):
        """
        Given: Six contracts of one account
        When: Their invoices are generated concurrently, each in its own session
        Then: Every generation either gets a unique number or reports a conflict
        """
        # Arrange
        contract_ids = [f"ctr_{n}" for n in range(6)]
        await seed(make_account("acct_1", "Acme Corp"))
        await seed(*(make_contract(contract_id, "acct_1") for contract_id in contract_ids))

        async def generate(contract_id):
            async with session_factory() as session:
                return await contract_invoice_use_case(session).execute(
                    GenerateInvoiceCommandDTO(contract_id=contract_id), today=date(2026, 6, 1)
                )

        # Act
        results = await asyncio.gather(*(generate(contract_id) for contract_id in contract_ids))

        # Assert
        succeeded = [result.value.invoice_number for result in results if result.is_ok()]
        conflicts = [result for result in results if result.is_err()]
        assert succeeded
        assert len(set(succeeded)) == len(succeeded)
        assert all(number.startswith("INV-2026-") for number in succeeded)
        assert all(result.error.code == "INVOICE_NUMBER_CONFLICT" for result in conflicts)

        invoice_repo = SqlAlchemyInvoiceRepository(db_session)
        for number in succeeded:
            assert await invoice_repo.get_by_invoice_number(number) is not None

    @pytest.mark.asyncio
    async def test_failed_generation_writes_nothing(self, db_session, seed, make_account, make_contract):
        # Arrange
        await seed(
            make_account("acct_1", "Acme Corp"),
            make_contract("ctr_1", "acct_1", status=ContractStatus.CANCELLED),
        )

        # Act
        result = await contract_invoice_use_case(db_session).execute(
            GenerateInvoiceCommandDTO(contract_id="ctr_1")
        )

        # Assert
        assert result.error.code == "CONTRACT_NOT_ACTIVE"
        assert await SqlAlchemyInvoiceRepository(db_session).get_by_invoice_number("INV-2026-000001") is None


class TestConsolidatedInvoicePersistence:

    @pytest.mark.asyncio
    async def test_hierarchy_with_shared_contract(self, db_session, seed, make_account, make_contract):
        """
        Given: Parent -> two active children (+ one inactive), a shared outside contract
        When: A consolidated invoice is generated for January
        Then: Owned and shared contracts of active accounts are billed to the parent
        """
        # Arrange
        await seed(
            make_account("parent", "Acme Holdings"),
            make_account("outside", "Partner Ltd"),
        )
        await seed(
            make_account("child_a", "Acme East", parent_id="parent"),
            make_account("child_b", "Acme West", parent_id="parent"),
            make_account("child_c", "Acme Closed", parent_id="parent", status=AccountStatus.INACTIVE),
            make_account("grandchild", "Acme East Labs", parent_id="child_a"),
        )
        await seed(
            make_contract("a1", "child_a", contract_value=Decimal("12000.00")),
            make_contract("b1", "child_b", seat_count=10, seat_price=Decimal("50.00")),
            make_contract("c1", "child_c", contract_value=Decimal("99999.00")),
            make_contract("g1", "grandchild", contract_value=Decimal("2400.00")),
            make_contract("x1", "outside", contract_value=Decimal("6000.00")),
            make_contract("old", "child_a", start_date=date(2025, 1, 1), end_date=date(2025, 12, 31)),
        )
        await seed(ContractShare(contract_id="x1", account_id="child_b"))

        command = ConsolidatedInvoiceCommandDTO(
            parent_account_id="parent",
            period_start=date(2026, 1, 1),
            period_end=date(2026, 1, 31),
        )

        # Act
        result = await consolidated_use_case(db_session).execute(command, today=date(2026, 2, 1))

        # Assert
        assert result.is_ok(), result.error
        assert result.value.subsidiaries_included == 3
        # 1000 + 500 + 200 + 500
        assert result.value.total == Decimal("2200.00")

        invoice_repo = SqlAlchemyInvoiceRepository(db_session)
        invoice = await invoice_repo.get_by_id(result.value.invoice_id)
        items = await invoice_repo.get_items(invoice.id)
        assert invoice.consolidated is True
        assert invoice.account_id == "parent"
        assert invoice.contract_id is None
        assert invoice.notes == "Consolidated invoice for 4 account(s)"
        descriptions = sorted(item.description for item in items)
        assert descriptions == [
            "Contract CTR-a1 - Acme East - Period: 2026-01-01 to 2026-01-31",
            "Contract CTR-b1 - Acme West (10 seats) - Period: 2026-01-01 to 2026-01-31",
            "Contract CTR-g1 - Acme East Labs - Period: 2026-01-01 to 2026-01-31",
            "Contract CTR-x1 - Partner Ltd - Period: 2026-01-01 to 2026-01-31",
        ]

    @pytest.mark.asyncio
    async def test_soft_deleted_children_are_excluded(self, db_session, seed, make_account, make_contract):
        # Arrange
        await seed(make_account("parent", "Acme Holdings"))
        await seed(make_account("gone", "Acme Gone", parent_id="parent", deleted_at=datetime(2025, 12, 1)))
        await seed(make_contract("p1", "parent"), make_contract("z1", "gone"))

        command = ConsolidatedInvoiceCommandDTO(
            parent_account_id="parent",
            period_start=date(2026, 1, 1),
            period_end=date(2026, 1, 31),
        )

        # Act
        result = await consolidated_use_case(db_session).execute(command, today=date(2026, 2, 1))

        # Assert
        assert result.value.subsidiaries_included == 0
        assert result.value.total == Decimal("1000.00")

    @pytest.mark.asyncio
    async def test_credit_hold_parent(self, db_session, seed, make_account, make_contract):
        await seed(make_account("parent", "Acme Holdings", credit_hold=True))
        await seed(make_contract("p1", "parent"))

        result = await consolidated_use_case(db_session).execute(
            ConsolidatedInvoiceCommandDTO(
                parent_account_id="parent",
                period_start=date(2026, 1, 1),
                period_end=date(2026, 1, 31),
            )
        )

        assert result.error.code == "CREDIT_HOLD"


class TestQueuedBilling:

    @pytest.mark.asyncio
    async def test_queued_job_produces_invoice(self, session_factory, seed, make_account, make_contract):
        """
        Given: A queued generate-contract-invoice job
        When: The contract-billing worker drains its queue
        Then: The job completes with the invoice number in its result
        """
        # Arrange
        await seed(make_account("acct_1", "Acme Corp"), make_contract("ctr_1", "acct_1"))
        queue = InMemoryJobQueue(QueueName.CONTRACT_BILLING, concurrency=5)
        queued = await QueueBillingJob({QueueName.CONTRACT_BILLING: queue}).execute(
            JobType.GENERATE_CONTRACT_INVOICE,
            {"contract_id": "ctr_1", "period_start": "2026-01-01", "period_end": "2026-01-31"},
        )

        # Act
        await BillingWorker(queue, ContractBillingProcessor(session_factory)).drain()

        # Assert
        job = await queue.get_job(queued.value.job_id)
        assert job.state == JobState.COMPLETED
        assert job.result["invoice_number"].startswith("INV-")
        assert Decimal(job.result["total"]) == Decimal("1000.00")

    @pytest.mark.asyncio
    async def test_queued_job_for_missing_contract_fails(self, session_factory):
        # Arrange
        queue = InMemoryJobQueue(QueueName.CONTRACT_BILLING)
        job = await queue.add(JobType.GENERATE_CONTRACT_INVOICE, {"contract_id": "missing"})

        # Act
        await BillingWorker(queue, ContractBillingProcessor(session_factory)).drain()

        # Assert
        failed = await queue.get_job(job.id)
        assert failed.state == JobState.FAILED
        assert failed.failed_reason == "CONTRACT_NOT_FOUND: Contract missing not found"
