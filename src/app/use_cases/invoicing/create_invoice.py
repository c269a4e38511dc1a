"""CreateInvoice Use Case

Creates an invoice together with its initial line items and adjustments,
computing the derived totals and allocating a per-owner invoice number.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.repositories.invoice_adjustment_repository import InvoiceAdjustmentRepository
from src.domain.base import utc_now
from src.domain.errors import ConflictError, DomainError
from src.domain.invoice import Invoice
from src.domain.invoice_calculator import compute_totals
from .children import new_adjustment, new_item
from .dtos import CreateInvoiceCommandDTO, InvoiceResponseDTO

logger = logging.getLogger(__name__)


class CreateInvoice:
    """
    Use Case: Create an invoice with its items and adjustments

    Business Rules:
    1. Amounts are converted to minor units once, before computing totals
    2. Totals are derived, never taken from the client
    3. Invoice number is INV-YYYYMM-NNN, sequential per owner and month
    4. Invoice, items and adjustments are written in one transaction

    Flow:
    1. Convert items/adjustments to minor units
    2. Compute totals
    3. Allocate invoice number
    4. Insert invoice, then its children
    5. Commit transaction
    6. Return response

    A number collision with a concurrent creation is reported as
    INVOICE_NUMBER_CONFLICT; retrying is up to the caller.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        item_repo: InvoiceItemRepository,
        adjustment_repo: InvoiceAdjustmentRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.item_repo = item_repo
        self.adjustment_repo = adjustment_repo
        self.clock = clock

    async def execute(self, command: CreateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute invoice creation

        Args:
            command: CreateInvoiceCommandDTO with customer, tax rate, items, adjustments

        Returns:
            Result[InvoiceResponseDTO]: Success with invoice details or error
        """
        try:
            # Step 1: Convert to minor units
            items = [new_item(position, dto) for position, dto in enumerate(command.items)]
            adjustments = [
                new_adjustment(position, dto) for position, dto in enumerate(command.adjustments)
            ]

            # Step 2: Compute totals
            totals = compute_totals(items, adjustments, command.tax_rate)

            # Step 3: Allocate invoice number
            now = self.clock()
            invoice_number = await self.invoice_repo.next_invoice_number(command.owner_id, now)

            # Step 4: Insert invoice and children
            invoice = Invoice(
                owner_id=command.owner_id,
                invoice_number=invoice_number,
                customer_name=command.customer_name,
                customer_email=str(command.customer_email),
                due_date=command.due_date,
                tax_rate=command.tax_rate,
                status=command.status,
                subtotal=totals.subtotal,
                tax_amount=totals.tax_amount,
                adjustments_total=totals.adjustments_total,
                total=totals.total,
                bank_account_id=int(command.bank_account_id) if command.bank_account_id else None,
                version=1,
                created_at=now,
                updated_at=now,
            )

            try:
                created_invoice = await self.invoice_repo.create(invoice)
            except IntegrityError as e:
                raise ConflictError(f"Invoice number {invoice_number} already taken") from e

            for item in items:
                item.invoice_id = created_invoice.id
                await self.item_repo.create(item)

            for adjustment in adjustments:
                adjustment.invoice_id = created_invoice.id
                await self.adjustment_repo.create(adjustment)

            # Step 5: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Invoice {created_invoice.invoice_number} (id={created_invoice.id}) created "
                f"for owner {command.owner_id}: {len(items)} items, "
                f"{len(adjustments)} adjustments, total={totals.total}"
            )

            # Step 6: Build response
            return Return.ok(InvoiceResponseDTO.from_entities(created_invoice, items, adjustments))

        except ConflictError as e:
            await self.uow.rollback()
            logger.warning(f"Invoice number conflict for owner {command.owner_id}: {e}")
            return Return.err(
                Error(
                    code="INVOICE_NUMBER_CONFLICT",
                    message="Invoice number was taken by a concurrent request, retry",
                    reason=str(e),
                )
            )

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="VALIDATION_ERROR",
                    message=str(e),
                    reason="Invalid invoice data",
                )
            )

        except asyncio.CancelledError:
            await self.uow.rollback()
            raise

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create invoice for owner {command.owner_id}: {e}")
            return Return.err(
                Error(
                    code="CREATE_INVOICE_FAILED",
                    message="Failed to create invoice",
                    reason=str(e),
                )
            )
