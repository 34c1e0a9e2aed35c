"""In-Memory Job Queue Implementation

Keeps billing jobs in process memory. Used for local development, tests,
and single-process deployments where the API runs the workers itself.
"""

import logging
import uuid
from collections import OrderedDict, deque
from datetime import datetime, timedelta
from typing import Any, Deque, Dict, Optional

from src.app.services.job_queue import JobQueue
from src.domain.billing_job import BillingJob, JobState, JobType, QueueName

logger = logging.getLogger(__name__)


class InMemoryJobQueue(JobQueue):
    """
    JobQueue backed by dictionaries and a FIFO deque

    All mutations happen without awaiting, so concurrent workers on the same
    event loop never observe a half-updated job. Completed jobs are trimmed to
    completed_retention; failed jobs are dropped after failed_ttl_seconds.
    """

    def __init__(
        self,
        name: QueueName,
        concurrency: int = 1,
        max_attempts: int = 1,
        backoff_seconds: float = 1.0,
        completed_retention: int = 100,
        failed_ttl_seconds: int = 86400,
    ):
        super().__init__(name, concurrency)
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.completed_retention = completed_retention
        self.failed_ttl_seconds = failed_ttl_seconds

        self._jobs: Dict[str, BillingJob] = {}
        self._waiting: Deque[str] = deque()
        self._completed: "OrderedDict[str, None]" = OrderedDict()
        # job id -> retry time / finish time
        self._delayed: Dict[str, datetime] = {}
        self._failed: "OrderedDict[str, datetime]" = OrderedDict()

    async def add(self, job_type: JobType, data: Dict[str, Any]) -> BillingJob:
        job = BillingJob(
            id=uuid.uuid4().hex,
            queue=self.name,
            name=job_type,
            data=data,
            max_attempts=self.max_attempts,
        )
        self._jobs[job.id] = job
        self._waiting.append(job.id)
        return job.model_copy()

    async def get_job(self, job_id: str) -> Optional[BillingJob]:
        self._evict_failed()
        job = self._jobs.get(job_id)
        return job.model_copy() if job else None

    async def fetch_next(self) -> Optional[BillingJob]:
        self._promote_delayed()

        if not self._waiting:
            return None

        job = self._jobs[self._waiting.popleft()]
        job.state = JobState.ACTIVE
        job.attempts_made += 1
        job.processed_on = datetime.utcnow()
        return job.model_copy()

    async def update_progress(self, job_id: str, progress: int) -> None:
        job = self._jobs.get(job_id)
        if job:
            job.progress = max(0, min(100, progress))

    async def complete(self, job_id: str, result: Dict[str, Any]) -> None:
        job = self._jobs[job_id]
        job.state = JobState.COMPLETED
        job.progress = 100
        job.result = result
        job.finished_on = datetime.utcnow()

        self._completed[job_id] = None
        while len(self._completed) > self.completed_retention:
            expired_id, _ = self._completed.popitem(last=False)
            self._jobs.pop(expired_id, None)

    async def fail(self, job_id: str, reason: str) -> BillingJob:
        job = self._jobs[job_id]
        job.failed_reason = reason

        if job.can_retry():
            delay = self.backoff_seconds * (2 ** (job.attempts_made - 1))
            job.state = JobState.DELAYED
            job.run_at = datetime.utcnow() + timedelta(seconds=delay)
            self._delayed[job_id] = job.run_at
            logger.info(f"Job {job_id} delayed {delay}s before attempt {job.attempts_made + 1}")
        else:
            job.state = JobState.FAILED
            job.finished_on = datetime.utcnow()
            self._failed[job_id] = job.finished_on

        return job.model_copy()

    async def get_counts(self) -> Dict[str, int]:
        self._evict_failed()
        counts = {state.value: 0 for state in JobState}
        for job in self._jobs.values():
            counts[job.state.value] += 1
        return counts

    def _promote_delayed(self) -> None:
        now = datetime.utcnow()
        due_ids = [job_id for job_id, run_at in self._delayed.items() if run_at <= now]
        for job_id in due_ids:
            del self._delayed[job_id]
            job = self._jobs[job_id]
            job.state = JobState.WAITING
            job.run_at = None
            self._waiting.append(job_id)

    def _evict_failed(self) -> None:
        # _failed is ordered by finish time
        cutoff = datetime.utcnow() - timedelta(seconds=self.failed_ttl_seconds)
        while self._failed:
            job_id, finished_on = next(iter(self._failed.items()))
            if finished_on > cutoff:
                break
            del self._failed[job_id]
            self._jobs.pop(job_id, None)
