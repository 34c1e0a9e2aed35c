"""GenerateContractInvoice Use Case

Turns one contract's billing period into a persisted draft invoice.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.contract_repository import ContractRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.product_repository import ProductRepository
from src.domain.billing_period import billing_period
from src.domain.charge_policy import setup_fee, should_bill
from src.domain.contract import ContractStatus
from src.domain.contract_pricing import frequency_label, price_contract, to_cents
from src.domain.invoice import BillingType, Invoice, InvoiceStatus
from src.domain.invoice_item import InvoiceItem
from .dtos import GenerateInvoiceCommandDTO, InvoiceGenerationResponseDTO

logger = logging.getLogger(__name__)


class GenerateContractInvoice:
    """
    Use Case: Generate a draft invoice for one contract

    Business Rules:
    1. Contract must exist, belong to an existing account and be active
    2. Products that should not be billed this period (usage-based, in trial,
       one-time after the first period) reject the whole invoice
    3. Seat-based pricing when seat_count and seat_price are both set,
       otherwise the period share of contract_value
    4. Setup fee is added as its own line in the first billing period
    5. Invoice and items are written in a single transaction

    Flow:
    1. Fetch contract and owning account
    2. Validate status and billing period
    3. Apply the charge-type policy
    4. Price the subscription line (+ setup fee)
    5. Claim the invoice number
    6. Persist invoice and items, commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        contract_repo: ContractRepository,
        account_repo: AccountRepository,
        invoice_repo: InvoiceRepository,
        product_repo: Optional[ProductRepository] = None,
    ):
        self.uow = uow
        self.contract_repo = contract_repo
        self.account_repo = account_repo
        self.invoice_repo = invoice_repo
        self.product_repo = product_repo

    async def execute(
        self,
        command: GenerateInvoiceCommandDTO,
        today: Optional[date] = None,
    ) -> Result[InvoiceGenerationResponseDTO]:
        """
        Execute invoice generation

        Args:
            command: GenerateInvoiceCommandDTO with contract_id and optional period
            today: Issue date override (defaults to date.today())

        Returns:
            Result[InvoiceGenerationResponseDTO]: invoice id, number and total, or error
        """
        try:
            # Step 1: Fetch contract and owning account
            contract = await self.contract_repo.get_by_id(command.contract_id)
            if not contract:
                return Return.err(
                    Error(
                        code="CONTRACT_NOT_FOUND",
                        message=f"Contract {command.contract_id} not found",
                    )
                )

            account = await self.account_repo.get_by_id(contract.account_id)
            if not account:
                return Return.err(
                    Error(
                        code="ACCOUNT_NOT_FOUND",
                        message=f"Account {contract.account_id} not found",
                    )
                )

            # Step 2: Validate status and billing period
            if contract.status != ContractStatus.ACTIVE:
                return Return.err(
                    Error(
                        code="CONTRACT_NOT_ACTIVE",
                        message=f"Contract {contract.contract_number} is not active",
                        reason=f"status={getattr(contract.status, 'value', contract.status)}",
                    )
                )

            if (
                command.period_start
                and command.period_end
                and command.period_end < command.period_start
            ):
                return Return.err(
                    Error(
                        code="VALIDATION_ERROR",
                        message="period_end must not be before period_start",
                    )
                )

            issue_date = today or date.today()
            period_start, period_end = billing_period(
                contract.billing_frequency,
                explicit_start=command.period_start,
                explicit_end=command.period_end,
                today=issue_date,
            )

            # Step 3: Apply the charge-type policy
            product = None
            if self.product_repo is not None:
                product = await self.product_repo.get_billable_product(contract)

            if not should_bill(product, contract.start_date, period_start):
                return Return.err(
                    Error(
                        code="BILLING_SKIPPED",
                        message=f"Contract {contract.contract_number} is not billable "
                                f"for period starting {period_start}",
                        reason=f"charge_type={product.charge_type}" if product else None,
                    )
                )

            # Step 4: Price the subscription line (+ setup fee)
            charge = price_contract(contract, product.volume_tiers if product else None)

            description = f"{frequency_label(contract.billing_frequency)} Subscription"
            if charge.seat_based:
                description += f" - {contract.seat_count} seats"

            items: List[InvoiceItem] = [
                InvoiceItem(
                    description=description,
                    quantity=charge.quantity,
                    unit_price=charge.unit_price,
                    amount=charge.amount,
                )
            ]

            fee = to_cents(setup_fee(product, contract.start_date, period_start))
            if fee > 0:
                items.append(
                    InvoiceItem(
                        description="Setup Fee (one-time)",
                        quantity=Decimal(1),
                        unit_price=fee,
                        amount=fee,
                    )
                )

            subtotal = sum((item.amount for item in items), Decimal(0))
            tax = Decimal(0)
            discount = Decimal(0)

            # Step 5: Claim the invoice number
            invoice_number = await self.invoice_repo.next_invoice_number(issue_date.year)

            # Step 6: Persist invoice and items
            invoice = Invoice(
                invoice_number=invoice_number,
                account_id=account.id,
                contract_id=contract.id,
                issue_date=issue_date,
                due_date=issue_date + timedelta(days=account.payment_terms_days or 0),
                period_start=period_start,
                period_end=period_end,
                subtotal=subtotal,
                tax=tax,
                discount=discount,
                total=subtotal + tax - discount,
                currency=account.currency or "USD",
                status=InvoiceStatus.DRAFT,
                billing_type=BillingType.RECURRING,
                consolidated=False,
            )

            created_invoice = await self.invoice_repo.create_with_items(invoice, items)
            await self.uow.commit()

            logger.info(
                f"Generated invoice {created_invoice.invoice_number} for contract "
                f"{contract.contract_number}: total={created_invoice.total}"
            )

            return Return.ok(
                InvoiceGenerationResponseDTO(
                    invoice_id=created_invoice.id,
                    invoice_number=created_invoice.invoice_number,
                    total=created_invoice.total,
                )
            )

        except IntegrityError as e:
            await self.uow.rollback()
            logger.warning(f"Invoice number conflict for contract {command.contract_id}: {e}")
            return Return.err(
                Error(
                    code="INVOICE_NUMBER_CONFLICT",
                    message="Invoice number already taken, retry the request",
                    reason=str(e),
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Invoice generation failed for contract {command.contract_id}")
            return Return.err(
                Error(
                    code="GENERATE_INVOICE_FAILED",
                    message="Failed to generate invoice",
                    reason=str(e),
                )
            )
