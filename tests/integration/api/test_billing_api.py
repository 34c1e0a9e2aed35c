"""Integration tests for Billing API endpoints"""

import pytest
from decimal import Decimal
from httpx import AsyncClient

from src.domain.billing_job import QueueName
from src.worker.billing_worker import build_workers


class TestGenerateInvoiceAPI:

    @pytest.mark.asyncio
    async def test_generate_invoice_success(self, client: AsyncClient, seed, make_account, make_contract):
        """POST /billing/generate returns 201 with the invoice number and total"""
        # Arrange
        await seed(
            make_account("acct_1", "Acme Corp"),
            make_contract("ctr_1", "acct_1", seat_count=5, seat_price=Decimal("40.00")),
        )

        # Act
        response = await client.post(
            "/billing/generate",
            json={"contract_id": "ctr_1", "period_start": "2026-01-01", "period_end": "2026-01-31"},
        )

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["invoice_number"].startswith("INV-")
        assert Decimal(data["total"]) == Decimal("200.00")
        assert data["invoice_id"]

    @pytest.mark.asyncio
    async def test_generate_invoice_contract_not_found(self, client: AsyncClient):
        response = await client.post("/billing/generate", json={"contract_id": "missing"})

        assert response.status_code == 404
        data = response.json()
        assert data["error"]["code"] == "CONTRACT_NOT_FOUND"
        assert isinstance(data["error"]["message"], str)

    @pytest.mark.asyncio
    async def test_generate_invoice_invalid_period(self, client: AsyncClient, seed, make_account, make_contract):
        await seed(make_account("acct_1", "Acme Corp"), make_contract("ctr_1", "acct_1"))

        response = await client.post(
            "/billing/generate",
            json={"contract_id": "ctr_1", "period_start": "2026-02-01", "period_end": "2026-01-01"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_generate_invoice_request_validation(self, client: AsyncClient):
        response = await client.post("/billing/generate", json={"contract_id": ""})

        assert response.status_code == 422  # Pydantic validation error


class TestConsolidatedInvoiceAPI:

    @pytest.mark.asyncio
    async def test_generate_consolidated_invoice(self, client: AsyncClient, seed, make_account, make_contract):
        # Arrange
        await seed(make_account("parent", "Acme Holdings"))
        await seed(
            make_account("child_a", "Acme East", parent_id="parent"),
            make_account("child_b", "Acme West", parent_id="parent"),
        )
        await seed(make_contract("a1", "child_a"), make_contract("b1", "child_b"))

        # Act
        response = await client.post(
            "/billing/consolidated",
            json={"parent_account_id": "parent", "period_start": "2026-01-01", "period_end": "2026-01-31"},
        )

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["subsidiaries_included"] == 2
        assert Decimal(data["total"]) == Decimal("2000.00")

    @pytest.mark.asyncio
    async def test_credit_hold_is_forbidden(self, client: AsyncClient, seed, make_account):
        await seed(make_account("parent", "Acme Holdings", credit_hold=True))

        response = await client.post(
            "/billing/consolidated",
            json={"parent_account_id": "parent", "period_start": "2026-01-01", "period_end": "2026-01-31"},
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "CREDIT_HOLD"

    @pytest.mark.asyncio
    async def test_no_active_contracts(self, client: AsyncClient, seed, make_account):
        await seed(make_account("parent", "Acme Holdings"))

        response = await client.post(
            "/billing/consolidated",
            json={"parent_account_id": "parent", "period_start": "2026-01-01", "period_end": "2026-01-31"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "NO_ACTIVE_CONTRACTS"


class TestBillingJobsAPI:

    @pytest.mark.asyncio
    async def test_queue_then_poll_status(self, client: AsyncClient, app, session_factory, seed, make_account, make_contract):
        """
        Given: A queued invoice generation
        When: The worker drains the queue
        Then: GET /billing/jobs/{id} reports the completed result
        """
        # Arrange
        await seed(make_account("acct_1", "Acme Corp"), make_contract("ctr_1", "acct_1"))

        # Act
        queued = await client.post(
            "/billing/queue",
            json={"contract_id": "ctr_1", "period_start": "2026-01-01", "period_end": "2026-01-31"},
        )
        job_id = queued.json()["job_id"]
        waiting = await client.get(f"/billing/jobs/{job_id}")

        workers = build_workers(app.state.queues, session_factory)
        await workers[QueueName.CONTRACT_BILLING].drain()
        completed = await client.get(f"/billing/jobs/{job_id}")

        # Assert
        assert queued.status_code == 202
        assert queued.json()["queue"] == "contract-billing"
        assert waiting.json()["state"] == "waiting"
        assert completed.status_code == 200
        data = completed.json()
        assert data["state"] == "completed"
        assert data["progress"] == 100
        assert Decimal(data["result"]["total"]) == Decimal("1000.00")
        assert data["attempts_made"] == 1

    @pytest.mark.asyncio
    async def test_batch_job_fails_as_not_implemented(self, client: AsyncClient, app, session_factory):
        # Act
        queued = await client.post("/billing/batch", json={"billing_period": "monthly"})
        job_id = queued.json()["job_id"]
        await build_workers(app.state.queues, session_factory)[QueueName.CONTRACT_BILLING].drain()
        status = await client.get(f"/billing/jobs/{job_id}")

        # Assert
        assert queued.status_code == 202
        assert status.json()["state"] == "failed"
        assert status.json()["error"] == "Batch contract billing is not yet implemented"

    @pytest.mark.asyncio
    async def test_queue_consolidated(self, client: AsyncClient):
        response = await client.post(
            "/billing/consolidated/queue",
            json={"parent_account_id": "parent", "period_start": "2026-01-01", "period_end": "2026-01-31"},
        )

        assert response.status_code == 202
        assert response.json()["queue"] == "consolidated-billing"

        stats = await client.get("/billing/queue/consolidated/stats")
        assert stats.json() == {
            "queue": "consolidated-billing",
            "waiting": 1,
            "active": 0,
            "completed": 0,
            "failed": 0,
            "delayed": 0,
            "total": 1,
        }

    @pytest.mark.asyncio
    async def test_contract_queue_stats(self, client: AsyncClient):
        await client.post("/billing/queue", json={"contract_id": "ctr_1"})
        await client.post("/billing/queue", json={"contract_id": "ctr_2"})

        response = await client.get("/billing/queue/stats")

        assert response.status_code == 200
        assert response.json()["waiting"] == 2
        assert response.json()["total"] == 2

    @pytest.mark.asyncio
    async def test_job_not_found(self, client: AsyncClient):
        response = await client.get("/billing/jobs/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "JOB_NOT_FOUND"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
