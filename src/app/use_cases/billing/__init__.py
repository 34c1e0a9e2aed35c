"""Billing domain use cases"""
from .generate_contract_invoice import GenerateContractInvoice
from .generate_consolidated_invoice import GenerateConsolidatedInvoice
from .billing_jobs import QueueBillingJob, GetBillingJobStatus, GetQueueStats
from .dtos import (
    GenerateInvoiceCommandDTO,
    InvoiceGenerationResponseDTO,
    ConsolidatedInvoiceCommandDTO,
    ConsolidatedInvoiceResponseDTO,
    BatchBillingCommandDTO,
    QueuedJobResponseDTO,
    JobStatusDTO,
    QueueStatsDTO,
)

__all__ = [
    "GenerateContractInvoice",
    "GenerateConsolidatedInvoice",
    "QueueBillingJob",
    "GetBillingJobStatus",
    "GetQueueStats",
    "GenerateInvoiceCommandDTO",
    "InvoiceGenerationResponseDTO",
    "ConsolidatedInvoiceCommandDTO",
    "ConsolidatedInvoiceResponseDTO",
    "BatchBillingCommandDTO",
    "QueuedJobResponseDTO",
    "JobStatusDTO",
    "QueueStatsDTO",
]
