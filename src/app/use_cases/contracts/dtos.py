"""Data Transfer Objects for Contract Sharing Use Cases"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class ShareContractCommandDTO(BaseModel):
    """Command DTO for sharing a contract with another account"""

    contract_id: str = Field(..., min_length=1)
    account_id: str = Field(
        ...,
        min_length=1,
        description="Account that gains visibility of the contract"
    )
    notes: Optional[str] = None


class ContractShareDTO(BaseModel):
    id: str
    contract_id: str
    account_id: str
    notes: Optional[str] = None
    created_at: datetime


class ContractSharesResponseDTO(BaseModel):
    contract_id: str
    shares: List[ContractShareDTO]
    total: int
