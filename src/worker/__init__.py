"""Background workers for billing service"""
from .billing_worker import BillingWorker, build_workers
from .contract_billing_processor import ContractBillingProcessor
from .consolidated_billing_processor import ConsolidatedBillingProcessor
from .processor import BillingJobError, JobProcessor

__all__ = [
    "BillingWorker",
    "build_workers",
    "ContractBillingProcessor",
    "ConsolidatedBillingProcessor",
    "BillingJobError",
    "JobProcessor",
]
