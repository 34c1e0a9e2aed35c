"""Job Queue Interface

Defines the contract for the background queues that run billing jobs.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from src.domain.billing_job import BillingJob, JobType, QueueName


class JobQueue(ABC):
    """
    Queue of BillingJobs with per-queue concurrency

    Implementations keep failed jobs for inspection and prune completed
    jobs to a bounded retention window.
    """

    def __init__(self, name: QueueName, concurrency: int = 1):
        self.name = name
        self.concurrency = concurrency

    @abstractmethod
    async def add(self, job_type: JobType, data: Dict[str, Any]) -> BillingJob:
        """
        Enqueue a job without waiting for it to run

        Args:
            job_type: Job type (dispatch key for the worker)
            data: JSON-serializable payload

        Returns:
            The waiting BillingJob (with its generated id)
        """
        pass

    @abstractmethod
    async def get_job(self, job_id: str) -> Optional[BillingJob]:
        """
        Retrieve a job by ID

        Args:
            job_id: Job identifier

        Returns:
            BillingJob if still retained, None otherwise
        """
        pass

    @abstractmethod
    async def fetch_next(self) -> Optional[BillingJob]:
        """
        Move the next due job to active and return it

        Delayed jobs whose backoff has elapsed are promoted first.

        Returns:
            The active BillingJob, or None when nothing is waiting
        """
        pass

    @abstractmethod
    async def update_progress(self, job_id: str, progress: int) -> None:
        pass

    @abstractmethod
    async def complete(self, job_id: str, result: Dict[str, Any]) -> None:
        """Mark an active job completed and store its result"""
        pass

    @abstractmethod
    async def fail(self, job_id: str, reason: str) -> BillingJob:
        """
        Record a failed attempt

        The job goes to delayed (exponential backoff) while attempts remain,
        otherwise to failed with the reason retained.

        Returns:
            The updated BillingJob
        """
        pass

    @abstractmethod
    async def get_counts(self) -> Dict[str, int]:
        """
        Count jobs per state

        Returns:
            Mapping of waiting/active/completed/failed/delayed to counts
        """
        pass

    async def close(self) -> None:
        pass
