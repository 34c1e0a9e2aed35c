"""Builds the billing job queues for the configured backend"""

import logging
from typing import Dict

from src.adapter.services.in_memory_job_queue import InMemoryJobQueue
from src.adapter.services.redis_job_queue import RedisJobQueue
from src.app.services.job_queue import JobQueue
from src.domain.billing_job import QueueName

logger = logging.getLogger(__name__)


def _concurrency(config, queue_name: QueueName) -> int:
    if queue_name is QueueName.CONSOLIDATED_BILLING:
        return int(config.CONSOLIDATED_BILLING_CONCURRENCY)
    return int(config.CONTRACT_BILLING_CONCURRENCY)


def create_job_queue(config, queue_name: QueueName) -> JobQueue:
    """
    Create one queue from ApplicationConfig

    Args:
        config: ApplicationConfig (or compatible object)
        queue_name: Queue to build

    Returns:
        InMemoryJobQueue or RedisJobQueue depending on QUEUE_BACKEND
    """
    options = dict(
        concurrency=_concurrency(config, queue_name),
        max_attempts=int(config.JOB_MAX_ATTEMPTS),
        backoff_seconds=float(config.JOB_BACKOFF_SECONDS),
        completed_retention=int(config.COMPLETED_JOB_RETENTION),
        failed_ttl_seconds=int(config.FAILED_JOB_TTL_SECONDS),
    )

    backend = str(config.QUEUE_BACKEND).lower()
    if backend == "redis":
        return RedisJobQueue.from_url(
            queue_name,
            config.REDIS_URL,
            completed_ttl_seconds=int(config.COMPLETED_JOB_TTL_SECONDS),
            **options,
        )
    if backend != "memory":
        raise ValueError(f"Unsupported QUEUE_BACKEND: {config.QUEUE_BACKEND}")

    return InMemoryJobQueue(queue_name, **options)


def create_job_queues(config) -> Dict[QueueName, JobQueue]:
    queues = {name: create_job_queue(config, name) for name in QueueName}
    logger.info(
        f"Billing queues ready on '{config.QUEUE_BACKEND}' backend: "
        + ", ".join(f"{name.value} (concurrency {queue.concurrency})" for name, queue in queues.items())
    )
    return queues
