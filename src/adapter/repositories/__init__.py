from .account_repository import SqlAlchemyAccountRepository
from .contract_repository import SqlAlchemyContractRepository
from .contract_share_repository import SqlAlchemyContractShareRepository
from .product_repository import SqlAlchemyProductRepository
from .invoice_repository import SqlAlchemyInvoiceRepository

__all__ = [
    "SqlAlchemyAccountRepository",
    "SqlAlchemyContractRepository",
    "SqlAlchemyContractShareRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyInvoiceRepository",
]
