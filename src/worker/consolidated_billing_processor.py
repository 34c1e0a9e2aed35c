"""Processor for the consolidated-billing queue"""

import logging
from typing import Any, Dict

from src.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from src.adapter.repositories.contract_repository import SqlAlchemyContractRepository
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.billing import (
    ConsolidatedInvoiceCommandDTO,
    GenerateConsolidatedInvoice,
)
from src.app.use_cases.billing.generate_consolidated_invoice import MAX_ACCOUNT_DEPTH
from src.domain.billing_job import BillingJob, JobType
from .processor import BillingJobError, JobProcessor

logger = logging.getLogger(__name__)


class ConsolidatedBillingProcessor(JobProcessor):
    """Handles generate-consolidated-invoice jobs"""

    def __init__(self, session_factory, max_depth: int = MAX_ACCOUNT_DEPTH):
        self.session_factory = session_factory
        self.max_depth = max_depth

    async def process(self, job: BillingJob) -> Dict[str, Any]:
        if job.name != JobType.GENERATE_CONSOLIDATED_INVOICE:
            raise ValueError(f"Unknown job type for consolidated billing: {job.name}")

        command = ConsolidatedInvoiceCommandDTO.model_validate(job.data)
        logger.info(
            f"Processing consolidated billing for account {command.parent_account_id} "
            f"({command.period_start} to {command.period_end})"
        )

        async with self.session_factory() as session:
            use_case = GenerateConsolidatedInvoice(
                uow=SqlAlchemyUnitOfWork(session),
                account_repo=SqlAlchemyAccountRepository(session),
                contract_repo=SqlAlchemyContractRepository(session),
                invoice_repo=SqlAlchemyInvoiceRepository(session),
                max_depth=self.max_depth,
            )
            result = await use_case.execute(command)

        if result.is_err():
            raise BillingJobError(result.error)

        return result.value.model_dump(mode="json")
