"""DeleteInvoice Use Case

Deletes an invoice and all of its children in one transaction.
"""

import asyncio
import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.repositories.invoice_adjustment_repository import InvoiceAdjustmentRepository
from .dtos import InvoiceDeletedResponseDTO

logger = logging.getLogger(__name__)


class DeleteInvoice:
    """
    Use Case: Delete an invoice owned by the caller

    Flow:
    1. Load invoice with row lock
    2. Check ownership
    3. Delete items, adjustments, then the invoice row
    4. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        item_repo: InvoiceItemRepository,
        adjustment_repo: InvoiceAdjustmentRepository,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.item_repo = item_repo
        self.adjustment_repo = adjustment_repo

    async def execute(self, owner_id: int, invoice_id: int) -> Result[InvoiceDeletedResponseDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(invoice_id, for_update=True)

            if not invoice:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="INVOICE_NOT_FOUND",
                        message=f"Invoice with ID {invoice_id} not found",
                    )
                )

            if invoice.owner_id != owner_id:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="ACCESS_DENIED",
                        message="access denied",
                        reason=f"Invoice {invoice_id} belongs to another user",
                    )
                )

            items_deleted = await self.item_repo.delete_by_invoice_id(invoice.id)
            adjustments_deleted = await self.adjustment_repo.delete_by_invoice_id(invoice.id)
            await self.invoice_repo.delete(invoice)

            await self.uow.commit()

            logger.info(
                f"Invoice {invoice_id} deleted with {items_deleted} items "
                f"and {adjustments_deleted} adjustments"
            )

            return Return.ok(InvoiceDeletedResponseDTO(id=str(invoice_id)))

        except asyncio.CancelledError:
            await self.uow.rollback()
            raise

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to delete invoice {invoice_id}: {e}")
            return Return.err(
                Error(
                    code="DELETE_INVOICE_FAILED",
                    message="Failed to delete invoice",
                    reason=str(e),
                )
            )
