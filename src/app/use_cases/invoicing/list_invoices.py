"""ListInvoices Use Case

Lists the authenticated owner's invoices, newest first.
"""

from collections import defaultdict
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.repositories.invoice_adjustment_repository import InvoiceAdjustmentRepository
from src.domain.invoice import InvoiceStatus
from .dtos import InvoiceListResponseDTO, InvoiceResponseDTO

MAX_LIMIT = 100


class ListInvoices:
    """
    Use Case: List invoices of an owner

    Business Rules:
    1. Only the owner's invoices are returned
    2. Ordered by creation time, newest first
    3. limit is clamped to 1..100, offset to >= 0
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

    async def execute(
        self,
        owner_id: int,
        status: Optional[InvoiceStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Result[InvoiceListResponseDTO]:
        limit = max(1, min(limit, MAX_LIMIT))
        offset = max(0, offset)

        try:
            invoices = await self.invoice_repo.get_by_owner_id(
                owner_id, status=status, limit=limit, offset=offset
            )

            # One query per child table for the whole page
            invoice_ids = [invoice.id for invoice in invoices]
            items_by_invoice = defaultdict(list)
            for item in await self.item_repo.get_by_invoice_ids(invoice_ids):
                items_by_invoice[item.invoice_id].append(item)
            adjustments_by_invoice = defaultdict(list)
            for adjustment in await self.adjustment_repo.get_by_invoice_ids(invoice_ids):
                adjustments_by_invoice[adjustment.invoice_id].append(adjustment)

            responses = [
                InvoiceResponseDTO.from_entities(
                    invoice,
                    items_by_invoice[invoice.id],
                    adjustments_by_invoice[invoice.id],
                )
                for invoice in invoices
            ]

            return Return.ok(
                InvoiceListResponseDTO(
                    invoices=responses,
                    limit=limit,
                    offset=offset,
                    count=len(responses),
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_INVOICES_FAILED",
                    message="Failed to retrieve invoices",
                    reason=str(e),
                )
            )
