"""UpdateInvoice Use Case

Applies a patch to an invoice and reconciles its items and adjustments
against the full desired lists sent by the client, all in one transaction.
"""

import asyncio
import logging
from typing import List, Sequence
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.repositories.invoice_adjustment_repository import InvoiceAdjustmentRepository
from src.domain.errors import ChildNotFoundError, DomainError
from src.domain.invoice import Invoice
from src.domain.invoice_adjustment import InvoiceAdjustment
from src.domain.invoice_calculator import compute_totals
from src.domain.invoice_item import InvoiceItem
from src.domain.reconciler import ReconcilePlan, reconcile_children
from .children import new_adjustment, new_item, overwrite_adjustment, overwrite_item
from .dtos import (
    InvoiceAdjustmentInputDTO,
    InvoiceItemInputDTO,
    InvoiceResponseDTO,
    UpdateInvoiceCommandDTO,
)

logger = logging.getLogger(__name__)


class UpdateInvoice:
    """
    Use Case: Update invoice fields and reconcile its children

    Business Rules:
    1. Only the owner may update an invoice
    2. A stale version (when sent) is rejected
    3. Sent items/adjustments replace the stored collection wholesale:
       entries with a known id are overwritten, entries without id are
       created, stored entries not mentioned are deleted
    4. An id that does not belong to the invoice is an error, never a create
    5. Totals are recomputed from the resulting children and tax rate
    6. Everything happens in one transaction; any failure rolls back all of it

    Flow:
    1. Load invoice with row lock (SELECT FOR UPDATE)
    2. Check ownership and version
    3. Apply scalar field changes
    4. Reconcile items, then adjustments
    5. Recompute totals, bump version, write the invoice row
    6. Commit transaction
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

    async def execute(self, command: UpdateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute invoice update

        Args:
            command: UpdateInvoiceCommandDTO; only fields that were sent are applied

        Returns:
            Result[InvoiceResponseDTO]: Success with the updated invoice or error
        """
        try:
            # Step 1: Load with lock
            invoice = await self.invoice_repo.get_by_id(command.invoice_id, for_update=True)

            if not invoice:
                return await self._fail(
                    Error(
                        code="INVOICE_NOT_FOUND",
                        message=f"Invoice with ID {command.invoice_id} not found",
                    )
                )

            # Step 2: Ownership and version
            if invoice.owner_id != command.owner_id:
                return await self._fail(
                    Error(
                        code="ACCESS_DENIED",
                        message="access denied",
                        reason=f"Invoice {invoice.id} belongs to another user",
                    )
                )

            if command.version is not None and command.version != invoice.version:
                return await self._fail(
                    Error(
                        code="INVOICE_VERSION_CONFLICT",
                        message=f"Invoice {invoice.id} was modified by another request",
                        reason=f"expected version {command.version}, current {invoice.version}",
                    )
                )

            # Step 3: Scalar fields
            self._apply_fields(invoice, command)

            # Step 4: Children
            items = await self.item_repo.get_by_invoice_id(invoice.id)
            if command.is_set("items"):
                try:
                    item_plan = reconcile_children(invoice.id, items, command.items)
                except ChildNotFoundError as e:
                    return await self._fail(
                        Error(
                            code="INVOICE_ITEM_NOT_FOUND",
                            message=f"Invoice item {e.child_id} not found on invoice {invoice.id}",
                        )
                    )
                items = await self._apply_item_plan(item_plan, command.items)
                logger.info(f"Invoice {invoice.id} items reconciled: {item_plan.summary()}")

            adjustments = await self.adjustment_repo.get_by_invoice_id(invoice.id)
            if command.is_set("adjustments"):
                try:
                    adjustment_plan = reconcile_children(invoice.id, adjustments, command.adjustments)
                except ChildNotFoundError as e:
                    return await self._fail(
                        Error(
                            code="INVOICE_ADJUSTMENT_NOT_FOUND",
                            message=f"Invoice adjustment {e.child_id} not found on invoice {invoice.id}",
                        )
                    )
                adjustments = await self._apply_adjustment_plan(adjustment_plan, command.adjustments)
                logger.info(
                    f"Invoice {invoice.id} adjustments reconciled: {adjustment_plan.summary()}"
                )

            # Step 5: Totals and invoice row (children excluded)
            totals = compute_totals(items, adjustments, invoice.tax_rate)
            invoice.subtotal = totals.subtotal
            invoice.tax_amount = totals.tax_amount
            invoice.adjustments_total = totals.adjustments_total
            invoice.total = totals.total
            invoice.version += 1

            updated_invoice = await self.invoice_repo.update(invoice)

            # Step 6: Commit transaction
            await self.uow.commit()

            return Return.ok(InvoiceResponseDTO.from_entities(updated_invoice, items, adjustments))

        except DomainError as e:
            return await self._fail(
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
            logger.error(f"Failed to update invoice {command.invoice_id}: {e}")
            return await self._fail(
                Error(
                    code="UPDATE_INVOICE_FAILED",
                    message="Failed to update invoice",
                    reason=str(e),
                )
            )

    async def _fail(self, error: Error) -> Result:
        await self.uow.rollback()
        return Return.err(error)

    @staticmethod
    def _apply_fields(invoice: Invoice, command: UpdateInvoiceCommandDTO) -> None:
        if command.is_set("customer_name"):
            invoice.customer_name = command.customer_name
        if command.is_set("customer_email"):
            invoice.customer_email = str(command.customer_email)
        if command.is_set("due_date"):
            invoice.due_date = command.due_date
        if command.is_set("tax_rate"):
            invoice.tax_rate = command.tax_rate
        if command.is_set("status"):
            invoice.status = command.status
        if command.is_set("bank_account_id"):
            invoice.bank_account_id = int(command.bank_account_id) if command.bank_account_id else None

    async def _apply_item_plan(
        self,
        plan: ReconcilePlan[InvoiceItem, InvoiceItemInputDTO],
        desired: Sequence[InvoiceItemInputDTO],
    ) -> List[InvoiceItem]:
        """Write updates and creates in desired order, then deletes"""
        rows_by_entry = {id(entry): row for row, entry in plan.to_update}
        result: List[InvoiceItem] = []

        for position, entry in enumerate(desired):
            row = rows_by_entry.get(id(entry))
            if row is not None:
                result.append(await self.item_repo.update(overwrite_item(row, position, entry)))
            else:
                item = new_item(position, entry)
                item.invoice_id = plan.invoice_id
                result.append(await self.item_repo.create(item))

        for row in plan.to_delete:
            await self.item_repo.delete(row)

        return result

    async def _apply_adjustment_plan(
        self,
        plan: ReconcilePlan[InvoiceAdjustment, InvoiceAdjustmentInputDTO],
        desired: Sequence[InvoiceAdjustmentInputDTO],
    ) -> List[InvoiceAdjustment]:
        rows_by_entry = {id(entry): row for row, entry in plan.to_update}
        result: List[InvoiceAdjustment] = []

        for position, entry in enumerate(desired):
            row = rows_by_entry.get(id(entry))
            if row is not None:
                result.append(
                    await self.adjustment_repo.update(overwrite_adjustment(row, position, entry))
                )
            else:
                adjustment = new_adjustment(position, entry)
                adjustment.invoice_id = plan.invoice_id
                result.append(await self.adjustment_repo.create(adjustment))

        for row in plan.to_delete:
            await self.adjustment_repo.delete(row)

        return result
