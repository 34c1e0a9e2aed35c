"""ShareContract Use Case

Makes a contract visible to an account outside its owner, so it is billed
with that account's consolidated invoice.
"""

import logging

from sqlalchemy.exc import IntegrityError

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.contract_repository import ContractRepository
from src.app.repositories.contract_share_repository import ContractShareRepository
from src.domain.contract_share import ContractShare
from .dtos import ContractShareDTO, ShareContractCommandDTO

logger = logging.getLogger(__name__)


class ShareContract:
    """
    Use Case: Share a contract with an account

    Business Rules:
    1. Contract and target account must exist
    2. The owning account cannot be a share target
    3. A contract is shared at most once per account
    """

    def __init__(
        self,
        uow: UnitOfWork,
        contract_repo: ContractRepository,
        account_repo: AccountRepository,
        share_repo: ContractShareRepository,
    ):
        self.uow = uow
        self.contract_repo = contract_repo
        self.account_repo = account_repo
        self.share_repo = share_repo

    async def execute(self, command: ShareContractCommandDTO) -> Result[ContractShareDTO]:
        try:
            contract = await self.contract_repo.get_by_id(command.contract_id)
            if not contract:
                return Return.err(
                    Error(
                        code="CONTRACT_NOT_FOUND",
                        message=f"Contract {command.contract_id} not found",
                    )
                )

            account = await self.account_repo.get_by_id(command.account_id)
            if not account or account.deleted_at is not None:
                return Return.err(
                    Error(
                        code="ACCOUNT_NOT_FOUND",
                        message=f"Account {command.account_id} not found",
                    )
                )

            if contract.account_id == account.id:
                return Return.err(
                    Error(
                        code="CANNOT_SHARE_WITH_OWNER",
                        message=f"Account {account.account_name} already owns contract "
                                f"{contract.contract_number}",
                    )
                )

            existing = await self.share_repo.get(contract.id, account.id)
            if existing:
                return self._already_shared(contract.contract_number, account.account_name)

            share = await self.share_repo.create(
                ContractShare(
                    contract_id=contract.id,
                    account_id=account.id,
                    notes=command.notes,
                )
            )
            await self.uow.commit()

            logger.info(f"Shared contract {contract.contract_number} with account {account.id}")

            return Return.ok(ContractShareDTO.model_validate(share, from_attributes=True))

        except IntegrityError:
            # Concurrent share of the same pair
            await self.uow.rollback()
            return self._already_shared(command.contract_id, command.account_id)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SHARE_CONTRACT_FAILED",
                    message="Failed to share contract",
                    reason=str(e),
                )
            )

    @staticmethod
    def _already_shared(contract_ref: str, account_ref: str) -> Result:
        return Return.err(
            Error(
                code="CONTRACT_ALREADY_SHARED",
                message=f"Contract {contract_ref} is already shared with {account_ref}",
            )
        )
