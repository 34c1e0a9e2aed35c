"""Unit tests for RedisJobQueue key handling with a mocked redis client"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.adapter.services.redis_job_queue import RedisJobQueue
from src.domain.billing_job import BillingJob, JobState, JobType, QueueName


@pytest.fixture
def pipe():
    pipe = MagicMock()
    pipe.__aenter__ = AsyncMock(return_value=pipe)
    pipe.__aexit__ = AsyncMock(return_value=False)
    pipe.execute = AsyncMock(return_value=[])
    return pipe


@pytest.fixture
def redis_client(pipe):
    client = MagicMock()
    client.pipeline = MagicMock(return_value=pipe)
    client.zrangebyscore = AsyncMock(return_value=[])
    client.zrange = AsyncMock(return_value=[])
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def queue(redis_client):
    return RedisJobQueue(
        QueueName.CONSOLIDATED_BILLING,
        redis_client,
        concurrency=2,
        completed_retention=100,
        completed_ttl_seconds=3600,
        failed_ttl_seconds=86400,
    )


def stored_job(job_id="job1", **overrides) -> str:
    fields = dict(id=job_id, queue=QueueName.CONSOLIDATED_BILLING, name=JobType.GENERATE_CONSOLIDATED_INVOICE)
    fields.update(overrides)
    return BillingJob(**fields).model_dump_json()


@pytest.mark.asyncio
class TestRedisJobQueue:

    async def test_add_stores_job_and_pushes_id(self, queue, pipe):
        job = await queue.add(JobType.GENERATE_CONSOLIDATED_INVOICE, {"parent_account_id": "acct_1"})

        key, payload = pipe.set.call_args.args
        assert key == f"billing:consolidated-billing:job:{job.id}"
        assert BillingJob.model_validate_json(payload).data == {"parent_account_id": "acct_1"}
        pipe.lpush.assert_called_once_with("billing:consolidated-billing:waiting", job.id)
        pipe.execute.assert_awaited_once()

    async def test_fetch_next_empty(self, queue, redis_client):
        redis_client.lmove = AsyncMock(return_value=None)

        assert await queue.fetch_next() is None

    async def test_fetch_next_moves_id_to_active_list_atomically(self, queue, redis_client):
        """
        Given: One waiting job
        When: fetch_next() claims it
        Then: The id moves waiting -> active in one LMOVE and the stored job is active
        """
        # Arrange
        redis_client.lmove = AsyncMock(return_value="job1")
        redis_client.get = AsyncMock(return_value=stored_job())
        redis_client.set = AsyncMock()

        # Act
        job = await queue.fetch_next()

        # Assert
        assert job.state == JobState.ACTIVE
        assert job.attempts_made == 1
        redis_client.lmove.assert_awaited_once_with(
            "billing:consolidated-billing:waiting",
            "billing:consolidated-billing:active",
            "RIGHT",
            "LEFT",
        )
        key, payload = redis_client.set.call_args.args
        assert key == "billing:consolidated-billing:job:job1"
        assert BillingJob.model_validate_json(payload).state == JobState.ACTIVE

    async def test_fetch_next_drops_expired_id_from_active(self, queue, redis_client):
        redis_client.lmove = AsyncMock(return_value="gone")
        redis_client.get = AsyncMock(return_value=None)
        redis_client.lrem = AsyncMock()

        assert await queue.fetch_next() is None
        redis_client.lrem.assert_awaited_once_with("billing:consolidated-billing:active", 0, "gone")

    async def test_complete_sets_ttl(self, queue, redis_client, pipe):
        redis_client.get = AsyncMock(return_value=stored_job(state=JobState.ACTIVE, attempts_made=1))

        await queue.complete("job1", {"total": "5.00"})

        key, payload = pipe.set.call_args.args
        assert pipe.set.call_args.kwargs == {"ex": 3600}
        assert BillingJob.model_validate_json(payload).state == JobState.COMPLETED
        pipe.lrem.assert_called_once_with("billing:consolidated-billing:active", 0, "job1")

    async def test_final_failure_kept_with_failed_ttl(self, queue, redis_client, pipe):
        redis_client.get = AsyncMock(return_value=stored_job(state=JobState.ACTIVE, attempts_made=1))

        failed = await queue.fail("job1", "CREDIT_HOLD: Account on hold")

        assert failed.state == JobState.FAILED
        assert failed.failed_reason == "CREDIT_HOLD: Account on hold"
        assert pipe.set.call_args.kwargs == {"ex": 86400}
        pipe.zadd.assert_called_once()
        assert pipe.zadd.call_args.args[0] == "billing:consolidated-billing:failed"

    async def test_counts(self, queue, pipe):
        pipe.execute = AsyncMock(return_value=[0, 0, 3, 1, 7, 2, 0])

        counts = await queue.get_counts()

        assert counts == {"waiting": 3, "active": 1, "completed": 7, "failed": 2, "delayed": 0}
