"""Processor for the contract-billing queue"""

import logging
from typing import Any, Dict

from src.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from src.adapter.repositories.contract_repository import SqlAlchemyContractRepository
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.billing import (
    BatchBillingCommandDTO,
    GenerateContractInvoice,
    GenerateInvoiceCommandDTO,
)
from src.domain.billing_job import BillingJob, JobType
from .processor import BillingJobError, JobProcessor

logger = logging.getLogger(__name__)


class ContractBillingProcessor(JobProcessor):
    """
    Handles generate-contract-invoice and batch-contract-billing jobs

    Usage:
        processor = ContractBillingProcessor(AsyncSessionLocal)
        result = await processor.process(job)
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def process(self, job: BillingJob) -> Dict[str, Any]:
        if job.name == JobType.GENERATE_CONTRACT_INVOICE:
            return await self._generate_invoice(job)
        if job.name == JobType.BATCH_CONTRACT_BILLING:
            return await self._batch_billing(job)
        raise ValueError(f"Unknown job type for contract billing: {job.name}")

    async def _generate_invoice(self, job: BillingJob) -> Dict[str, Any]:
        command = GenerateInvoiceCommandDTO.model_validate(job.data)
        logger.info(f"Processing invoice generation for contract {command.contract_id}")

        async with self.session_factory() as session:
            use_case = GenerateContractInvoice(
                uow=SqlAlchemyUnitOfWork(session),
                contract_repo=SqlAlchemyContractRepository(session),
                account_repo=SqlAlchemyAccountRepository(session),
                invoice_repo=SqlAlchemyInvoiceRepository(session),
                product_repo=SqlAlchemyProductRepository(session),
            )
            result = await use_case.execute(command)

        if result.is_err():
            raise BillingJobError(result.error)

        return result.value.model_dump(mode="json")

    async def _batch_billing(self, job: BillingJob) -> Dict[str, Any]:
        command = BatchBillingCommandDTO.model_validate(job.data)
        logger.info(
            f"Batch billing requested for {command.billing_period} contracts "
            f"on {command.billing_date.date()}"
        )
        raise NotImplementedError("Batch contract billing is not yet implemented")
