"""Request schemas for Contract API"""

from typing import Optional
from pydantic import BaseModel, Field


class ShareContractRequestSchema(BaseModel):
    """Request schema for POST /contracts/{contract_id}/shares"""

    account_id: str = Field(
        ...,
        min_length=1,
        description="Account that gains visibility of the contract"
    )

    notes: Optional[str] = Field(
        default=None,
        max_length=1000,
    )
