from .base import BaseModel, generate_uuid
from .account import Account, AccountStatus
from .contract import Contract, ContractStatus, BillingFrequency
from .contract_share import ContractShare
from .product import Product, ChargeType
from .invoice import Invoice, InvoiceStatus, BillingType
from .invoice_item import InvoiceItem
from .invoice_sequence import InvoiceSequence, format_invoice_number
from .billing_job import BillingJob, JobState, JobType, QueueName

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Account",
    "AccountStatus",
    "Contract",
    "ContractStatus",
    "BillingFrequency",
    "ContractShare",
    "Product",
    "ChargeType",
    "Invoice",
    "InvoiceStatus",
    "BillingType",
    "InvoiceItem",
    "InvoiceSequence",
    "format_invoice_number",
    "BillingJob",
    "JobState",
    "JobType",
    "QueueName",
]
