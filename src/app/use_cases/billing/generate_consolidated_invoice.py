"""GenerateConsolidatedInvoice Use Case

Rolls the contracts of an account hierarchy into one invoice for the parent.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.contract_repository import ContractRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.account import Account
from src.domain.contract import Contract
from src.domain.contract_pricing import price_contract
from src.domain.invoice import BillingType, Invoice, InvoiceStatus
from src.domain.invoice_item import InvoiceItem
from .dtos import ConsolidatedInvoiceCommandDTO, ConsolidatedInvoiceResponseDTO

logger = logging.getLogger(__name__)

MAX_ACCOUNT_DEPTH = 5


class GenerateConsolidatedInvoice:
    """
    Use Case: Generate one invoice for a parent account and its subsidiaries

    Business Rules:
    1. Parent must exist, not be soft-deleted and not be on credit hold
    2. Descendants are active, non-deleted accounts at most max_depth levels down
    3. Contracts owned by or shared with any collected account are billed
       when active and overlapping the period
    4. Each contract is priced like a single-contract invoice; zero lines are dropped
    5. The invoice belongs to the parent and has no contract_id

    Flow:
    1. Validate parent account and period
    2. Collect descendants
    3. Collect billable contracts
    4. Price one line per contract
    5. Claim the invoice number
    6. Persist invoice and items, commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        contract_repo: ContractRepository,
        invoice_repo: InvoiceRepository,
        max_depth: int = MAX_ACCOUNT_DEPTH,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.contract_repo = contract_repo
        self.invoice_repo = invoice_repo
        self.max_depth = max_depth

    async def execute(
        self,
        command: ConsolidatedInvoiceCommandDTO,
        today: Optional[date] = None,
    ) -> Result[ConsolidatedInvoiceResponseDTO]:
        """
        Execute consolidated invoice generation

        Args:
            command: ConsolidatedInvoiceCommandDTO with parent account and period
            today: Issue date override (defaults to date.today())

        Returns:
            Result[ConsolidatedInvoiceResponseDTO]: invoice details with the
            number of subsidiaries rolled up, or error
        """
        try:
            # Step 1: Validate parent account and period
            parent = await self.account_repo.get_by_id(command.parent_account_id)
            if not parent or parent.deleted_at is not None:
                return Return.err(
                    Error(
                        code="ACCOUNT_NOT_FOUND",
                        message=f"Account {command.parent_account_id} not found",
                    )
                )

            if parent.credit_hold:
                return Return.err(
                    Error(
                        code="CREDIT_HOLD",
                        message=f"Account {parent.account_name} is on credit hold",
                    )
                )

            if command.period_end < command.period_start:
                return Return.err(
                    Error(
                        code="VALIDATION_ERROR",
                        message="period_end must not be before period_start",
                    )
                )

            # Step 2: Collect descendants
            descendants: List[Account] = []
            if command.include_children:
                descendants = await self.collect_descendants(parent.id)

            accounts: Dict[str, Account] = {parent.id: parent}
            for account in descendants:
                accounts[account.id] = account

            # Step 3: Collect billable contracts
            contracts = await self.contract_repo.get_billable_for_accounts(
                list(accounts.keys()),
                command.period_start,
                command.period_end,
            )
            if not contracts:
                return Return.err(
                    Error(
                        code="NO_ACTIVE_CONTRACTS",
                        message="No active contracts found for consolidated billing period",
                    )
                )

            # Shared contracts may be owned outside the hierarchy
            missing_owner_ids = {c.account_id for c in contracts} - set(accounts)
            if missing_owner_ids:
                for owner in await self.account_repo.get_by_ids(missing_owner_ids):
                    accounts[owner.id] = owner

            # Step 4: Price one line per contract
            items: List[InvoiceItem] = []
            for contract in contracts:
                charge = price_contract(contract)
                if charge.amount <= 0:
                    continue

                owner = accounts.get(contract.account_id)
                items.append(
                    InvoiceItem(
                        description=self._describe(
                            contract,
                            owner.account_name if owner else contract.account_id,
                            command.period_start,
                            command.period_end,
                        ),
                        quantity=charge.quantity,
                        unit_price=charge.unit_price,
                        amount=charge.amount,
                    )
                )

            if not items:
                return Return.err(
                    Error(
                        code="NO_BILLABLE_ITEMS",
                        message="No billable items found for the specified period",
                    )
                )

            subtotal = sum((item.amount for item in items), Decimal(0))
            tax = self.calculate_tax(subtotal, parent)
            discount = Decimal(0)

            # Step 5: Claim the invoice number
            issue_date = today or date.today()
            invoice_number = await self.invoice_repo.next_invoice_number(issue_date.year)

            # Step 6: Persist invoice and items
            account_count = 1 + len(descendants)
            invoice = Invoice(
                invoice_number=invoice_number,
                account_id=parent.id,
                contract_id=None,
                issue_date=issue_date,
                due_date=issue_date + timedelta(days=parent.payment_terms_days or 0),
                period_start=command.period_start,
                period_end=command.period_end,
                subtotal=subtotal,
                tax=tax,
                discount=discount,
                total=subtotal + tax - discount,
                currency=parent.currency or "USD",
                status=InvoiceStatus.DRAFT,
                billing_type=BillingType.RECURRING,
                consolidated=True,
                notes=f"Consolidated invoice for {account_count} account(s)",
            )

            created_invoice = await self.invoice_repo.create_with_items(invoice, items)
            await self.uow.commit()

            logger.info(
                f"Generated consolidated invoice {created_invoice.invoice_number} for account "
                f"{parent.account_name}: {len(items)} line(s), {len(descendants)} subsidiaries, "
                f"total={created_invoice.total}"
            )

            return Return.ok(
                ConsolidatedInvoiceResponseDTO(
                    invoice_id=created_invoice.id,
                    invoice_number=created_invoice.invoice_number,
                    total=created_invoice.total,
                    subsidiaries_included=len(descendants),
                )
            )

        except IntegrityError as e:
            await self.uow.rollback()
            logger.warning(
                f"Invoice number conflict for consolidated billing of {command.parent_account_id}: {e}"
            )
            return Return.err(
                Error(
                    code="INVOICE_NUMBER_CONFLICT",
                    message="Invoice number already taken, retry the request",
                    reason=str(e),
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Consolidated billing failed for account {command.parent_account_id}")
            return Return.err(
                Error(
                    code="CONSOLIDATED_BILLING_FAILED",
                    message="Failed to generate consolidated invoice",
                    reason=str(e),
                )
            )

    async def collect_descendants(self, parent_id: str) -> List[Account]:
        """
        Breadth-first walk of active, non-deleted children

        Stops after max_depth levels; accounts already seen are not revisited.
        """
        visited = {parent_id}
        descendants: List[Account] = []
        frontier = [parent_id]
        depth = 0

        while frontier and depth < self.max_depth:
            children = await self.account_repo.get_active_children(frontier)
            frontier = []
            for child in children:
                if child.id in visited:
                    continue
                visited.add(child.id)
                descendants.append(child)
                frontier.append(child.id)
            depth += 1

        return descendants

    def calculate_tax(self, subtotal: Decimal, account: Account) -> Decimal:
        # TODO: jurisdiction-based tax once accounts carry a tax region
        return Decimal(0)

    @staticmethod
    def _describe(contract: Contract, account_name: str, period_start: date, period_end: date) -> str:
        description = f"Contract {contract.contract_number} - {account_name}"
        if contract.seat_count:
            description += f" ({contract.seat_count} seats)"
        return f"{description} - Period: {period_start.isoformat()} to {period_end.isoformat()}"
