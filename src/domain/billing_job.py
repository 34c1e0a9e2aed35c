"""Billing Job Domain Model

Background billing job tracked by a JobQueue. Not a database table:
job records live in the queue backend (in-memory or Redis).
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class QueueName(str, Enum):
    """Billing queues"""
    CONTRACT_BILLING = "contract-billing"
    CONSOLIDATED_BILLING = "consolidated-billing"


class JobType(str, Enum):
    """Job types and the queue each one runs on"""
    GENERATE_CONTRACT_INVOICE = "generate-contract-invoice"
    BATCH_CONTRACT_BILLING = "batch-contract-billing"
    GENERATE_CONSOLIDATED_INVOICE = "generate-consolidated-invoice"

    @property
    def queue(self) -> QueueName:
        if self is JobType.GENERATE_CONSOLIDATED_INVOICE:
            return QueueName.CONSOLIDATED_BILLING
        return QueueName.CONTRACT_BILLING


class JobState(str, Enum):
    """Job lifecycle: waiting -> active -> completed | failed (delayed between retries)"""
    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
    DELAYED = "delayed"


class BillingJob(BaseModel):
    """
    Billing Job - Unit of background billing work

    Domain Rules:
    - id is opaque and unique across queues
    - attempts_made counts every time the job became active
    - failed jobs keep failed_reason for operator inspection
    """

    id: str
    queue: QueueName
    name: JobType
    data: Dict[str, Any] = Field(default_factory=dict)
    state: JobState = JobState.WAITING
    progress: int = 0
    result: Optional[Dict[str, Any]] = None
    failed_reason: Optional[str] = None
    attempts_made: int = 0
    max_attempts: int = 1
    created_at: datetime = Field(default_factory=datetime.utcnow)
    run_at: Optional[datetime] = None
    processed_on: Optional[datetime] = None
    finished_on: Optional[datetime] = None

    def can_retry(self) -> bool:
        return self.attempts_made < self.max_attempts
