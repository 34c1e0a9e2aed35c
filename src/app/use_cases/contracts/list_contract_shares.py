"""ListContractShares Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.contract_repository import ContractRepository
from src.app.repositories.contract_share_repository import ContractShareRepository
from .dtos import ContractShareDTO, ContractSharesResponseDTO


class ListContractShares:
    """Use Case: List the accounts a contract is shared with"""

    def __init__(self, contract_repo: ContractRepository, share_repo: ContractShareRepository):
        self.contract_repo = contract_repo
        self.share_repo = share_repo

    async def execute(self, contract_id: str) -> Result[ContractSharesResponseDTO]:
        try:
            contract = await self.contract_repo.get_by_id(contract_id)
            if not contract:
                return Return.err(
                    Error(
                        code="CONTRACT_NOT_FOUND",
                        message=f"Contract {contract_id} not found",
                    )
                )

            shares = await self.share_repo.get_by_contract_id(contract_id)

            return Return.ok(
                ContractSharesResponseDTO(
                    contract_id=contract_id,
                    shares=[
                        ContractShareDTO.model_validate(share, from_attributes=True)
                        for share in shares
                    ],
                    total=len(shares),
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_CONTRACT_SHARES_FAILED",
                    message="Failed to list contract shares",
                    reason=str(e),
                )
            )
