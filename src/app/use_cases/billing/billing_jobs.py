"""Billing job use cases

Submit billing work to the background queues and inspect its progress.
"""

import logging
from typing import Any, Dict, Mapping, Union

from pydantic import ValidationError

from libs.result import Result, Return, Error
from src.app.services.job_queue import JobQueue
from src.domain.billing_job import BillingJob, JobType, QueueName
from .dtos import (
    BatchBillingCommandDTO,
    ConsolidatedInvoiceCommandDTO,
    GenerateInvoiceCommandDTO,
    JobStatusDTO,
    QueuedJobResponseDTO,
    QueueStatsDTO,
)

logger = logging.getLogger(__name__)

JOB_PAYLOADS = {
    JobType.GENERATE_CONTRACT_INVOICE: GenerateInvoiceCommandDTO,
    JobType.BATCH_CONTRACT_BILLING: BatchBillingCommandDTO,
    JobType.GENERATE_CONSOLIDATED_INVOICE: ConsolidatedInvoiceCommandDTO,
}


class QueueBillingJob:
    """
    Use Case: Enqueue a billing job without waiting for it

    The payload is validated against the job type's command DTO before it
    reaches the queue, so workers only see well-formed jobs.
    """

    def __init__(self, queues: Mapping[QueueName, JobQueue]):
        self.queues = queues

    async def execute(
        self,
        job_type: Union[JobType, str],
        payload: Dict[str, Any],
    ) -> Result[QueuedJobResponseDTO]:
        try:
            job_type = JobType(job_type)
        except ValueError:
            return Return.err(
                Error(
                    code="UNKNOWN_JOB_TYPE",
                    message=f"Unknown job type: {job_type}",
                )
            )

        try:
            command = JOB_PAYLOADS[job_type].model_validate(payload)
        except ValidationError as e:
            return Return.err(
                Error(
                    code="VALIDATION_ERROR",
                    message=f"Invalid payload for {job_type.value}",
                    reason=str(e),
                )
            )

        try:
            queue = self.queues[job_type.queue]
            job = await queue.add(job_type, command.model_dump(mode="json"))
        except Exception as e:
            logger.exception(f"Failed to enqueue {job_type.value}")
            return Return.err(
                Error(
                    code="QUEUE_JOB_FAILED",
                    message="Failed to queue billing job",
                    reason=str(e),
                )
            )

        logger.info(f"Queued {job_type.value} job {job.id} on {queue.name.value}")

        return Return.ok(
            QueuedJobResponseDTO(
                job_id=job.id,
                queue=job.queue.value,
                name=job.name.value,
                state=job.state.value,
            )
        )


class GetBillingJobStatus:
    """
    Use Case: Look up a billing job on any queue

    Completed jobs are only retained for a bounded window, so an old
    job id may come back JOB_NOT_FOUND.
    """

    def __init__(self, queues: Mapping[QueueName, JobQueue]):
        self.queues = queues

    async def execute(self, job_id: str) -> Result[JobStatusDTO]:
        try:
            for queue in self.queues.values():
                job = await queue.get_job(job_id)
                if job is not None:
                    return Return.ok(to_status_dto(job))
        except Exception as e:
            logger.exception(f"Failed to read job {job_id}")
            return Return.err(
                Error(
                    code="GET_JOB_STATUS_FAILED",
                    message="Failed to read billing job",
                    reason=str(e),
                )
            )

        return Return.err(
            Error(
                code="JOB_NOT_FOUND",
                message=f"Job {job_id} not found",
            )
        )


class GetQueueStats:
    """Use Case: Count jobs per state on one queue"""

    def __init__(self, queues: Mapping[QueueName, JobQueue]):
        self.queues = queues

    async def execute(self, queue_name: Union[QueueName, str]) -> Result[QueueStatsDTO]:
        try:
            queue = self.queues[QueueName(queue_name)]
        except (ValueError, KeyError):
            return Return.err(
                Error(
                    code="UNKNOWN_QUEUE",
                    message=f"Unknown queue: {queue_name}",
                )
            )

        try:
            counts = await queue.get_counts()
        except Exception as e:
            logger.exception(f"Failed to read counts of {queue.name.value}")
            return Return.err(
                Error(
                    code="GET_QUEUE_STATS_FAILED",
                    message="Failed to read queue statistics",
                    reason=str(e),
                )
            )

        return Return.ok(
            QueueStatsDTO(
                queue=queue.name.value,
                total=sum(counts.values()),
                **counts,
            )
        )


def to_status_dto(job: BillingJob) -> JobStatusDTO:
    return JobStatusDTO(
        id=job.id,
        name=job.name.value,
        queue=job.queue.value,
        data=job.data,
        state=job.state.value,
        progress=job.progress,
        result=job.result,
        error=job.failed_reason,
        attempts_made=job.attempts_made,
        created_at=job.created_at,
        processed_on=job.processed_on,
        finished_on=job.finished_on,
    )
