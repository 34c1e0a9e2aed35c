"""Data Transfer Objects for Billing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class GenerateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for generating a single-contract invoice

    Used as input to GenerateContractInvoice use case.
    Both period bounds given -> used verbatim; otherwise the period is
    computed from the contract's billing frequency.
    """

    contract_id: str = Field(
        ...,
        min_length=1,
        description="Contract to bill"
    )

    period_start: Optional[date] = Field(
        default=None,
        description="Explicit billing period start"
    )

    period_end: Optional[date] = Field(
        default=None,
        description="Explicit billing period end"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "contract_id": "7b0e2c64-3f0a-4a59-9d0b-5f0c2b1c9e11",
                "period_start": "2026-01-01",
                "period_end": "2026-03-31",
            }
        }


class InvoiceGenerationResponseDTO(BaseModel):
    """Response DTO for a generated invoice"""

    invoice_id: str
    invoice_number: str
    total: Decimal


class ConsolidatedInvoiceCommandDTO(BaseModel):
    """
    Command DTO for generating a consolidated invoice

    Used as input to GenerateConsolidatedInvoice use case.
    """

    parent_account_id: str = Field(
        ...,
        min_length=1,
        description="Account that receives the consolidated invoice"
    )

    period_start: date = Field(
        ...,
        description="Billing period start"
    )

    period_end: date = Field(
        ...,
        description="Billing period end"
    )

    include_children: bool = Field(
        default=True,
        description="Include contracts of descendant accounts"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "parent_account_id": "c1f5d8a2-8e44-4b8b-a0de-1e7a3c0d2b45",
                "period_start": "2026-01-01",
                "period_end": "2026-01-31",
                "include_children": True,
            }
        }


class ConsolidatedInvoiceResponseDTO(InvoiceGenerationResponseDTO):
    """Response DTO for a consolidated invoice"""

    subsidiaries_included: int = Field(
        ...,
        description="Number of descendant accounts rolled up"
    )


class BatchBillingCommandDTO(BaseModel):
    """Command DTO for batch contract billing"""

    billing_date: datetime = Field(
        default_factory=datetime.utcnow,
        description="Billing run date"
    )

    billing_period: str = Field(
        default="monthly",
        description="Billing frequency to run (monthly, quarterly, annual)"
    )


class QueuedJobResponseDTO(BaseModel):
    """Response DTO for an enqueued billing job"""

    job_id: str
    queue: str
    name: str
    state: str


class JobStatusDTO(BaseModel):
    """
    Response DTO for billing job status

    error carries the failure reason of failed jobs.
    """

    id: str
    name: str
    queue: str
    data: Dict[str, Any]
    state: str
    progress: int
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    attempts_made: int
    created_at: datetime
    processed_on: Optional[datetime] = None
    finished_on: Optional[datetime] = None


class QueueStatsDTO(BaseModel):
    """Response DTO for job counts of one queue"""

    queue: str
    waiting: int = 0
    active: int = 0
    completed: int = 0
    failed: int = 0
    delayed: int = 0
    total: int = 0
