"""UnshareContract Use Case"""

import logging

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.contract_share_repository import ContractShareRepository

logger = logging.getLogger(__name__)


class UnshareContract:
    """Use Case: Revoke an account's share of a contract"""

    def __init__(self, uow: UnitOfWork, share_repo: ContractShareRepository):
        self.uow = uow
        self.share_repo = share_repo

    async def execute(self, contract_id: str, account_id: str) -> Result[None]:
        try:
            share = await self.share_repo.get(contract_id, account_id)
            if not share:
                return Return.err(
                    Error(
                        code="SHARE_NOT_FOUND",
                        message=f"Contract {contract_id} is not shared with account {account_id}",
                    )
                )

            await self.share_repo.delete(share)
            await self.uow.commit()

            logger.info(f"Removed share of contract {contract_id} for account {account_id}")
            return Return.ok(None)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UNSHARE_CONTRACT_FAILED",
                    message="Failed to remove contract share",
                    reason=str(e),
                )
            )
