"""Contract API Routes

Contract sharing used by consolidated billing.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.contract_request import ShareContractRequestSchema
from src.app.use_cases.contracts import (
    ContractShareDTO,
    ContractSharesResponseDTO,
    ListContractShares,
    ShareContract,
    ShareContractCommandDTO,
    UnshareContract,
)
from src.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from src.adapter.repositories.contract_repository import SqlAlchemyContractRepository
from src.adapter.repositories.contract_share_repository import SqlAlchemyContractShareRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.api.error import raise_for_error

router = APIRouter(prefix="/contracts", tags=["Contracts"])


@router.post(
    "/{contract_id}/shares",
    response_model=ContractShareDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Contract or account not found"},
        409: {"description": "Contract already shared with the account"},
        400: {"description": "Account owns the contract"},
    }
)
async def share_contract(
    contract_id: str,
    request: ShareContractRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Share a contract with another account.

    Shared contracts are billed on the target account's consolidated invoices.
    """
    use_case = ShareContract(
        uow=SqlAlchemyUnitOfWork(session),
        contract_repo=SqlAlchemyContractRepository(session),
        account_repo=SqlAlchemyAccountRepository(session),
        share_repo=SqlAlchemyContractShareRepository(session),
    )
    command = ShareContractCommandDTO(
        contract_id=contract_id,
        account_id=request.account_id,
        notes=request.notes,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.delete(
    "/{contract_id}/shares/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Share not found"}},
)
async def unshare_contract(
    contract_id: str,
    account_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Revoke an account's share of a contract."""
    use_case = UnshareContract(
        uow=SqlAlchemyUnitOfWork(session),
        share_repo=SqlAlchemyContractShareRepository(session),
    )
    result = await use_case.execute(contract_id, account_id)

    if result.is_err():
        raise_for_error(result.error)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{contract_id}/shares",
    response_model=ContractSharesResponseDTO,
)
async def list_contract_shares(
    contract_id: str,
    session: AsyncSession = Depends(get_session)
):
    """List the accounts a contract is shared with."""
    use_case = ListContractShares(
        contract_repo=SqlAlchemyContractRepository(session),
        share_repo=SqlAlchemyContractShareRepository(session),
    )
    result = await use_case.execute(contract_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
