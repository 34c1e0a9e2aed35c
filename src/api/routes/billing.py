"""Billing API Routes

FastAPI routes for invoice generation and billing jobs.
"""

from typing import Dict

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.billing_request import (
    BatchBillingRequestSchema,
    ConsolidatedInvoiceRequestSchema,
    GenerateInvoiceRequestSchema,
)
from src.app.services.job_queue import JobQueue
from src.app.use_cases.billing import (
    ConsolidatedInvoiceCommandDTO,
    ConsolidatedInvoiceResponseDTO,
    GenerateConsolidatedInvoice,
    GenerateContractInvoice,
    GenerateInvoiceCommandDTO,
    GetBillingJobStatus,
    GetQueueStats,
    InvoiceGenerationResponseDTO,
    JobStatusDTO,
    QueueBillingJob,
    QueuedJobResponseDTO,
    QueueStatsDTO,
)
from src.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from src.adapter.repositories.contract_repository import SqlAlchemyContractRepository
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_job_queues, get_session
from src.api.error import raise_for_error
from src.domain.billing_job import JobType, QueueName
from config import ApplicationConfig

router = APIRouter(prefix="/billing", tags=["Billing"])

ERROR_EXAMPLE = {
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "CONTRACT_NOT_FOUND",
                    "message": "Contract 7b0e2c64-3f0a-4a59-9d0b-5f0c2b1c9e11 not found"
                }
            }
        }
    }
}


@router.post(
    "/generate",
    response_model=InvoiceGenerationResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Contract or account not found", **ERROR_EXAMPLE},
        409: {"description": "Invoice number conflict, safe to retry"},
        400: {"description": "Contract not active, billing skipped or invalid period"},
    }
)
async def generate_invoice(
    request: GenerateInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Generate a draft invoice for one contract, synchronously.

    **Request body:**
    - `contract_id` (required): Contract to bill
    - `period_start` / `period_end` (optional): Explicit billing period.
      Both given -> used as is; otherwise computed from the billing frequency.

    **Returns:**
    - 201: Invoice created (`invoice_id`, `invoice_number`, `total`)
    - 404: Contract or account not found
    - 409: Invoice number conflict
    - 400: Contract not active, billing skipped, or invalid period
    """
    use_case = GenerateContractInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        contract_repo=SqlAlchemyContractRepository(session),
        account_repo=SqlAlchemyAccountRepository(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        product_repo=SqlAlchemyProductRepository(session),
    )
    result = await use_case.execute(GenerateInvoiceCommandDTO(**request.model_dump()))

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/queue",
    response_model=QueuedJobResponseDTO,
    status_code=status.HTTP_202_ACCEPTED,
)
async def queue_invoice_generation(
    request: GenerateInvoiceRequestSchema,
    queues: Dict[QueueName, JobQueue] = Depends(get_job_queues)
):
    """
    Queue single-contract invoice generation.

    Poll `GET /billing/jobs/{job_id}` for the result.
    """
    result = await QueueBillingJob(queues).execute(
        JobType.GENERATE_CONTRACT_INVOICE, request.model_dump(mode="json")
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/batch",
    response_model=QueuedJobResponseDTO,
    status_code=status.HTTP_202_ACCEPTED,
)
async def queue_batch_billing(
    request: BatchBillingRequestSchema,
    queues: Dict[QueueName, JobQueue] = Depends(get_job_queues)
):
    """Queue a batch billing run for all contracts of a billing frequency."""
    payload = request.model_dump(mode="json", exclude_none=True)
    result = await QueueBillingJob(queues).execute(JobType.BATCH_CONTRACT_BILLING, payload)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/consolidated",
    response_model=ConsolidatedInvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Parent account not found"},
        403: {"description": "Parent account on credit hold"},
        400: {"description": "No active contracts or no billable items"},
    }
)
async def generate_consolidated_invoice(
    request: ConsolidatedInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Generate one invoice for a parent account and its subsidiaries, synchronously.

    **Request body:**
    - `parent_account_id` (required)
    - `period_start`, `period_end` (required)
    - `include_children` (optional, default true)

    **Returns:**
    - 201: Invoice created, with `subsidiaries_included`
    """
    use_case = GenerateConsolidatedInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        account_repo=SqlAlchemyAccountRepository(session),
        contract_repo=SqlAlchemyContractRepository(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        max_depth=int(ApplicationConfig.MAX_ACCOUNT_DEPTH),
    )
    result = await use_case.execute(ConsolidatedInvoiceCommandDTO(**request.model_dump()))

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/consolidated/queue",
    response_model=QueuedJobResponseDTO,
    status_code=status.HTTP_202_ACCEPTED,
)
async def queue_consolidated_invoice(
    request: ConsolidatedInvoiceRequestSchema,
    queues: Dict[QueueName, JobQueue] = Depends(get_job_queues)
):
    """Queue consolidated invoice generation on the consolidated-billing queue."""
    result = await QueueBillingJob(queues).execute(
        JobType.GENERATE_CONSOLIDATED_INVOICE, request.model_dump(mode="json")
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get(
    "/jobs/{job_id}",
    response_model=JobStatusDTO,
    responses={404: {"description": "Job not found or no longer retained"}},
)
async def get_job_status(
    job_id: str,
    queues: Dict[QueueName, JobQueue] = Depends(get_job_queues)
):
    """Status, progress, result or failure reason of a billing job."""
    result = await GetBillingJobStatus(queues).execute(job_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/queue/stats", response_model=QueueStatsDTO)
async def get_contract_queue_stats(
    queues: Dict[QueueName, JobQueue] = Depends(get_job_queues)
):
    """Job counts of the contract-billing queue."""
    result = await GetQueueStats(queues).execute(QueueName.CONTRACT_BILLING)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/queue/consolidated/stats", response_model=QueueStatsDTO)
async def get_consolidated_queue_stats(
    queues: Dict[QueueName, JobQueue] = Depends(get_job_queues)
):
    """Job counts of the consolidated-billing queue."""
    result = await GetQueueStats(queues).execute(QueueName.CONSOLIDATED_BILLING)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
