"""Contract sharing use cases"""
from .share_contract import ShareContract
from .unshare_contract import UnshareContract
from .list_contract_shares import ListContractShares
from .dtos import ShareContractCommandDTO, ContractShareDTO, ContractSharesResponseDTO

__all__ = [
    "ShareContract",
    "UnshareContract",
    "ListContractShares",
    "ShareContractCommandDTO",
    "ContractShareDTO",
    "ContractSharesResponseDTO",
]
