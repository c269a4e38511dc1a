"""GetInvoice Use Case

Read-only retrieval of one invoice with its items and adjustments.
"""

from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.repositories.invoice_adjustment_repository import InvoiceAdjustmentRepository
from .dtos import InvoiceResponseDTO


class GetInvoice:
    """
    Use Case: Get a single invoice of the authenticated owner

    Returns INVOICE_NOT_FOUND when the invoice does not exist and
    ACCESS_DENIED when it belongs to someone else.
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        item_repo: InvoiceItemRepository,
        adjustment_repo: InvoiceAdjustmentRepository,
    ):
        self.invoice_repo = invoice_repo
        self.item_repo = item_repo
        self.adjustment_repo = adjustment_repo

    async def execute(self, owner_id: int, invoice_id: int) -> Result[InvoiceResponseDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(invoice_id)

            if not invoice:
                return Return.err(
                    Error(
                        code="INVOICE_NOT_FOUND",
                        message=f"Invoice with ID {invoice_id} not found",
                    )
                )

            if invoice.owner_id != owner_id:
                return Return.err(
                    Error(
                        code="ACCESS_DENIED",
                        message="access denied",
                        reason=f"Invoice {invoice_id} belongs to another user",
                    )
                )

            items = await self.item_repo.get_by_invoice_id(invoice.id)
            adjustments = await self.adjustment_repo.get_by_invoice_id(invoice.id)

            return Return.ok(InvoiceResponseDTO.from_entities(invoice, items, adjustments))

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_INVOICE_FAILED",
                    message="Failed to retrieve invoice",
                    reason=str(e),
                )
            )
