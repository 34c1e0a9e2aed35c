"""Redis Job Queue Implementation

Stores billing jobs in Redis so the API and standalone workers share them.

Key layout (prefix = "billing:<queue name>"):
- <prefix>:job:<id>   JSON-encoded BillingJob
- <prefix>:waiting    list of job ids (LPUSH / LMOVE RIGHT = FIFO)
- <prefix>:active     list of job ids, filled atomically from waiting
- <prefix>:delayed    sorted set, score = retry timestamp
- <prefix>:completed  sorted set, score = finish timestamp
- <prefix>:failed     sorted set, score = finish timestamp
"""

import logging
import time
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import redis.asyncio as redis

from src.app.services.job_queue import JobQueue
from src.domain.billing_job import BillingJob, JobState, JobType, QueueName

logger = logging.getLogger(__name__)


class RedisJobQueue(JobQueue):
    """
    JobQueue backed by Redis lists and sorted sets

    Completed jobs expire after completed_ttl_seconds and are trimmed to
    completed_retention; failed jobs are kept for failed_ttl_seconds.
    """

    def __init__(
        self,
        name: QueueName,
        redis_client: redis.Redis,
        concurrency: int = 1,
        max_attempts: int = 1,
        backoff_seconds: float = 1.0,
        completed_retention: int = 100,
        completed_ttl_seconds: int = 3600,
        failed_ttl_seconds: int = 86400,
    ):
        super().__init__(name, concurrency)
        self.redis = redis_client
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.completed_retention = completed_retention
        self.completed_ttl_seconds = completed_ttl_seconds
        self.failed_ttl_seconds = failed_ttl_seconds

        prefix = f"billing:{name.value}"
        self._job_prefix = f"{prefix}:job:"
        self._waiting_key = f"{prefix}:waiting"
        self._active_key = f"{prefix}:active"
        self._delayed_key = f"{prefix}:delayed"
        self._completed_key = f"{prefix}:completed"
        self._failed_key = f"{prefix}:failed"

    @classmethod
    def from_url(cls, name: QueueName, redis_url: str, **kwargs) -> "RedisJobQueue":
        client = redis.from_url(redis_url, encoding="utf-8", decode_responses=True)
        return cls(name, client, **kwargs)

    async def add(self, job_type: JobType, data: Dict[str, Any]) -> BillingJob:
        job = BillingJob(
            id=uuid.uuid4().hex,
            queue=self.name,
            name=job_type,
            data=data,
            max_attempts=self.max_attempts,
        )
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(self._job_key(job.id), job.model_dump_json())
            pipe.lpush(self._waiting_key, job.id)
            await pipe.execute()
        return job

    async def get_job(self, job_id: str) -> Optional[BillingJob]:
        raw = await self.redis.get(self._job_key(job_id))
        if raw is None:
            return None
        return BillingJob.model_validate_json(raw)

    async def fetch_next(self) -> Optional[BillingJob]:
        await self._promote_delayed()

        # Single command, so a crashed worker never drops the id between lists
        job_id = await self.redis.lmove(self._waiting_key, self._active_key, "RIGHT", "LEFT")
        if job_id is None:
            return None

        job = await self.get_job(job_id)
        if job is None:
            logger.warning(f"Job {job_id} expired before it could run on {self.name.value}")
            await self.redis.lrem(self._active_key, 0, job_id)
            return None

        job.state = JobState.ACTIVE
        job.attempts_made += 1
        job.processed_on = datetime.utcnow()

        await self.redis.set(self._job_key(job.id), job.model_dump_json())
        return job

    async def update_progress(self, job_id: str, progress: int) -> None:
        job = await self.get_job(job_id)
        if job is None:
            return
        job.progress = max(0, min(100, progress))
        await self.redis.set(self._job_key(job_id), job.model_dump_json(), keepttl=True)

    async def complete(self, job_id: str, result: Dict[str, Any]) -> None:
        job = await self.get_job(job_id)
        if job is None:
            return

        job.state = JobState.COMPLETED
        job.progress = 100
        job.result = result
        job.finished_on = datetime.utcnow()

        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.lrem(self._active_key, 0, job_id)
            pipe.zadd(self._completed_key, {job_id: time.time()})
            pipe.set(self._job_key(job_id), job.model_dump_json(), ex=self.completed_ttl_seconds)
            await pipe.execute()

        await self._trim_completed()

    async def fail(self, job_id: str, reason: str) -> BillingJob:
        job = await self.get_job(job_id)
        if job is None:
            raise KeyError(f"Job {job_id} not found on {self.name.value}")

        job.failed_reason = reason

        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.lrem(self._active_key, 0, job_id)
            if job.can_retry():
                delay = self.backoff_seconds * (2 ** (job.attempts_made - 1))
                job.state = JobState.DELAYED
                job.run_at = datetime.utcnow() + timedelta(seconds=delay)
                pipe.zadd(self._delayed_key, {job_id: time.time() + delay})
                pipe.set(self._job_key(job_id), job.model_dump_json())
            else:
                job.state = JobState.FAILED
                job.finished_on = datetime.utcnow()
                pipe.zadd(self._failed_key, {job_id: time.time()})
                pipe.set(self._job_key(job_id), job.model_dump_json(), ex=self.failed_ttl_seconds)
            await pipe.execute()

        return job

    async def get_counts(self) -> Dict[str, int]:
        now = time.time()
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.zremrangebyscore(self._completed_key, 0, now - self.completed_ttl_seconds)
            pipe.zremrangebyscore(self._failed_key, 0, now - self.failed_ttl_seconds)
            pipe.llen(self._waiting_key)
            pipe.llen(self._active_key)
            pipe.zcard(self._completed_key)
            pipe.zcard(self._failed_key)
            pipe.zcard(self._delayed_key)
            _, _, waiting, active, completed, failed, delayed = await pipe.execute()

        return {
            JobState.WAITING.value: waiting,
            JobState.ACTIVE.value: active,
            JobState.COMPLETED.value: completed,
            JobState.FAILED.value: failed,
            JobState.DELAYED.value: delayed,
        }

    async def close(self) -> None:
        await self.redis.aclose()

    def _job_key(self, job_id: str) -> str:
        return f"{self._job_prefix}{job_id}"

    async def _promote_delayed(self) -> None:
        due_ids = await self.redis.zrangebyscore(self._delayed_key, 0, time.time())
        for job_id in due_ids:
            # zrem returns 0 when another worker already promoted this job
            if not await self.redis.zrem(self._delayed_key, job_id):
                continue
            job = await self.get_job(job_id)
            if job is None:
                continue
            job.state = JobState.WAITING
            job.run_at = None
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.set(self._job_key(job_id), job.model_dump_json())
                pipe.lpush(self._waiting_key, job_id)
                await pipe.execute()

    async def _trim_completed(self) -> None:
        overflow = await self.redis.zrange(self._completed_key, 0, -(self.completed_retention + 1))
        if not overflow:
            return
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.zrem(self._completed_key, *overflow)
            pipe.delete(*[self._job_key(job_id) for job_id in overflow])
            await pipe.execute()
