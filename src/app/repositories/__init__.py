from .account_repository import AccountRepository
from .contract_repository import ContractRepository
from .contract_share_repository import ContractShareRepository
from .product_repository import ProductRepository
from .invoice_repository import InvoiceRepository

__all__ = [
    "AccountRepository",
    "ContractRepository",
    "ContractShareRepository",
    "ProductRepository",
    "InvoiceRepository",
]
