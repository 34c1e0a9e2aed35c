"""Request schemas for Billing API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field


class GenerateInvoiceRequestSchema(BaseModel):
    """
    Request schema for single-contract invoice generation

    Used for POST /billing/generate and POST /billing/queue.
    """

    contract_id: str = Field(
        ...,
        min_length=1,
        description="Contract to bill (required, non-empty)"
    )

    period_start: Optional[date] = Field(
        default=None,
        description="Billing period start (defaults to today)"
    )

    period_end: Optional[date] = Field(
        default=None,
        description="Billing period end (defaults to start + one billing interval)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "contract_id": "7b0e2c64-3f0a-4a59-9d0b-5f0c2b1c9e11",
                "period_start": "2026-01-01",
                "period_end": "2026-03-31",
            }
        }


class ConsolidatedInvoiceRequestSchema(BaseModel):
    """
    Request schema for consolidated invoice generation

    Used for POST /billing/consolidated and POST /billing/consolidated/queue.
    """

    parent_account_id: str = Field(
        ...,
        min_length=1,
        description="Parent account receiving the invoice"
    )

    period_start: date = Field(..., description="Billing period start")

    period_end: date = Field(..., description="Billing period end")

    include_children: bool = Field(
        default=True,
        description="Roll up contracts of descendant accounts"
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


class BatchBillingRequestSchema(BaseModel):
    """Request schema for POST /billing/batch"""

    billing_date: Optional[datetime] = Field(
        default=None,
        description="Billing run date (defaults to now)"
    )

    billing_period: str = Field(
        default="monthly",
        description="Billing frequency to run (monthly, quarterly, annual)"
    )
