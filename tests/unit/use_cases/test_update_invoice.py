"""Unit tests for UpdateInvoice use case

Tests cover:
- Patch semantics (absent vs present fields)
- Child reconciliation: overwrite, create, delete, wipe
- Unknown child id rejected as not found
- Ownership and version checks
- Rollback on failure and on cancellation
"""

import asyncio
import pytest
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.invoicing.dtos import UpdateInvoiceCommandDTO
from src.app.use_cases.invoicing.update_invoice import UpdateInvoice
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_adjustment import AdjustmentKind, InvoiceAdjustment
from src.domain.invoice_item import InvoiceItem

CREATED_AT = datetime(2024, 1, 10, 9, 0, 0, tzinfo=timezone.utc)


def make_invoice(**overrides):
    fields = dict(
        id=1,
        owner_id=7,
        invoice_number="INV-202401-001",
        customer_name="Acme Corp",
        customer_email="billing@example.com",
        tax_rate=Decimal("10"),
        status=InvoiceStatus.DRAFT,
        subtotal=25000,
        tax_amount=2500,
        adjustments_total=0,
        total=27500,
        version=1,
        created_at=CREATED_AT,
        updated_at=CREATED_AT,
    )
    fields.update(overrides)
    return Invoice(**fields)


def make_items():
    return [
        InvoiceItem(id=11, invoice_id=1, position=0, name="Consulting", description="",
                    quantity=2, unit_price=10000),
        InvoiceItem(id=12, invoice_id=1, position=1, name="Support", description="",
                    quantity=1, unit_price=5000),
    ]


@pytest.fixture
def invoice():
    return make_invoice()


@pytest.fixture
def mock_invoice_repo(invoice):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=invoice)

    async def echo(entity):
        return entity

    repo.update = AsyncMock(side_effect=echo)
    return repo


@pytest.fixture
def mock_item_repo():
    repo = MagicMock()
    repo.get_by_invoice_id = AsyncMock(return_value=make_items())
    counter = {"next": 100}

    async def assign_id(item):
        item.id = counter["next"]
        counter["next"] += 1
        return item

    async def echo(item):
        return item

    repo.create = AsyncMock(side_effect=assign_id)
    repo.update = AsyncMock(side_effect=echo)
    repo.delete = AsyncMock()
    return repo


@pytest.fixture
def mock_adjustment_repo():
    repo = MagicMock()
    repo.get_by_invoice_id = AsyncMock(return_value=[])

    async def assign_id(adjustment):
        adjustment.id = 500
        return adjustment

    repo.create = AsyncMock(side_effect=assign_id)
    repo.update = AsyncMock()
    repo.delete = AsyncMock()
    return repo


@pytest.fixture
def update_invoice_use_case(mock_uow, mock_invoice_repo, mock_item_repo, mock_adjustment_repo):
    return UpdateInvoice(
        uow=mock_uow,
        invoice_repo=mock_invoice_repo,
        item_repo=mock_item_repo,
        adjustment_repo=mock_adjustment_repo,
    )


def command(**fields):
    return UpdateInvoiceCommandDTO(owner_id=7, invoice_id=1, **fields)


@pytest.mark.asyncio
class TestUpdateInvoicePatch:
    async def test_scalar_only_update_keeps_children(
        self, update_invoice_use_case, mock_item_repo, mock_uow
    ):
        """
        Given: an invoice with two items
        When: only customer_name is sent
        Then: the name changes, items are untouched, totals unchanged
        """
        result = await update_invoice_use_case.execute(command(customer_name="Globex"))

        assert result.is_ok()
        assert result.value.customer_name == "Globex"
        assert [i.id for i in result.value.items] == ["11", "12"]
        assert result.value.total == Decimal("275.00")
        assert result.value.version == 2
        mock_item_repo.create.assert_not_called()
        mock_item_repo.update.assert_not_called()
        mock_item_repo.delete.assert_not_called()
        mock_uow.commit.assert_called_once()

    async def test_tax_rate_change_recomputes_totals(self, update_invoice_use_case):
        result = await update_invoice_use_case.execute(command(tax_rate=Decimal("20")))

        assert result.is_ok()
        assert result.value.tax_amount == Decimal("50.00")
        assert result.value.total == Decimal("300.00")

    async def test_null_due_date_clears(self, update_invoice_use_case, invoice):
        invoice.due_date = datetime(2024, 2, 1).date()

        result = await update_invoice_use_case.execute(command(due_date=None))

        assert result.is_ok()
        assert result.value.due_date is None


@pytest.mark.asyncio
class TestUpdateInvoiceReconcile:
    async def test_resend_same_items_only_overwrites(
        self, update_invoice_use_case, mock_item_repo
    ):
        items = [
            {"id": "11", "name": "Consulting", "quantity": 2, "unit_price": "100.00"},
            {"id": "12", "name": "Support", "quantity": 1, "unit_price": "50.00"},
        ]

        result = await update_invoice_use_case.execute(command(items=items))

        assert result.is_ok()
        assert mock_item_repo.update.call_count == 2
        mock_item_repo.create.assert_not_called()
        mock_item_repo.delete.assert_not_called()
        assert result.value.total == Decimal("275.00")

    async def test_omitted_item_is_deleted(self, update_invoice_use_case, mock_item_repo):
        """
        Given: items 11 and 12 stored
        When: only item 11 is sent
        Then: item 12 is deleted and totals recomputed from item 11
        """
        items = [{"id": "11", "name": "Consulting", "quantity": 2, "unit_price": "100.00"}]

        result = await update_invoice_use_case.execute(command(items=items))

        assert result.is_ok()
        deleted = mock_item_repo.delete.call_args.args[0]
        assert deleted.id == 12
        assert [i.id for i in result.value.items] == ["11"]
        assert result.value.subtotal == Decimal("200.00")
        assert result.value.tax_amount == Decimal("20.00")
        assert result.value.total == Decimal("220.00")

    async def test_new_item_created_in_order(self, update_invoice_use_case, mock_item_repo):
        items = [
            {"name": "Setup", "quantity": 1, "unit_price": "10.00"},
            {"id": "11", "name": "Consulting", "quantity": 2, "unit_price": "100.00"},
            {"id": "12", "name": "Support", "quantity": 1, "unit_price": "50.00"},
        ]

        result = await update_invoice_use_case.execute(command(items=items))

        assert result.is_ok()
        created = mock_item_repo.create.call_args.args[0]
        assert created.invoice_id == 1
        assert created.position == 0
        assert [i.id for i in result.value.items] == ["100", "11", "12"]
        assert result.value.subtotal == Decimal("260.00")

    async def test_empty_items_wipes_collection(self, update_invoice_use_case, mock_item_repo):
        result = await update_invoice_use_case.execute(command(items=[]))

        assert result.is_ok()
        assert mock_item_repo.delete.call_count == 2
        assert result.value.items == []
        assert result.value.total == Decimal("0.00")

    async def test_unknown_item_id_is_not_found(
        self, update_invoice_use_case, mock_item_repo, mock_invoice_repo, mock_uow
    ):
        items = [{"id": "999", "name": "Ghost", "quantity": 1, "unit_price": "1.00"}]

        result = await update_invoice_use_case.execute(command(items=items))

        assert result.is_err()
        assert result.error.code == "INVOICE_ITEM_NOT_FOUND"
        mock_item_repo.create.assert_not_called()
        mock_invoice_repo.update.assert_not_called()
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()

    async def test_duplicate_item_id_is_validation_error(self, update_invoice_use_case, mock_uow):
        items = [
            {"id": "11", "name": "A", "quantity": 1, "unit_price": "1.00"},
            {"id": "11", "name": "B", "quantity": 1, "unit_price": "1.00"},
        ]

        result = await update_invoice_use_case.execute(command(items=items))

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        mock_uow.rollback.assert_called_once()

    async def test_adjustment_added(self, update_invoice_use_case, mock_adjustment_repo):
        adjustments = [{"description": "Discount", "kind": "deduction", "amount": "5.00"}]

        result = await update_invoice_use_case.execute(command(adjustments=adjustments))

        assert result.is_ok()
        created = mock_adjustment_repo.create.call_args.args[0]
        assert created.kind == AdjustmentKind.DEDUCTION
        assert created.amount == 500
        assert result.value.adjustments_total == Decimal("-5.00")
        assert result.value.total == Decimal("270.00")

    async def test_unknown_adjustment_id_is_not_found(
        self, update_invoice_use_case, mock_adjustment_repo
    ):
        mock_adjustment_repo.get_by_invoice_id = AsyncMock(
            return_value=[
                InvoiceAdjustment(id=50, invoice_id=1, position=0, description="Fee",
                                  kind=AdjustmentKind.ADDITION, amount=100)
            ]
        )
        adjustments = [{"id": "51", "description": "Fee", "kind": "addition", "amount": "1.00"}]

        result = await update_invoice_use_case.execute(command(adjustments=adjustments))

        assert result.is_err()
        assert result.error.code == "INVOICE_ADJUSTMENT_NOT_FOUND"


@pytest.mark.asyncio
class TestUpdateInvoiceGuards:
    async def test_invoice_not_found(self, update_invoice_use_case, mock_invoice_repo, mock_uow):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=None)

        result = await update_invoice_use_case.execute(command(customer_name="Globex"))

        assert result.is_err()
        assert result.error.code == "INVOICE_NOT_FOUND"
        mock_uow.rollback.assert_called_once()

    async def test_other_owner_denied(self, update_invoice_use_case, mock_item_repo):
        result = await update_invoice_use_case.execute(
            UpdateInvoiceCommandDTO(owner_id=8, invoice_id=1, items=[])
        )

        assert result.is_err()
        assert result.error.code == "ACCESS_DENIED"
        mock_item_repo.delete.assert_not_called()

    async def test_stale_version_rejected(self, update_invoice_use_case, invoice, mock_invoice_repo):
        invoice.version = 3

        result = await update_invoice_use_case.execute(command(customer_name="Globex", version=2))

        assert result.is_err()
        assert result.error.code == "INVOICE_VERSION_CONFLICT"
        mock_invoice_repo.update.assert_not_called()
        assert invoice.version == 3

    async def test_matching_version_accepted(self, update_invoice_use_case):
        result = await update_invoice_use_case.execute(command(customer_name="Globex", version=1))

        assert result.is_ok()
        assert result.value.version == 2


@pytest.mark.asyncio
class TestUpdateInvoiceErrorHandling:
    async def test_rollback_when_child_write_fails(
        self, update_invoice_use_case, mock_item_repo, mock_invoice_repo, mock_uow
    ):
        """
        Given: the third child operation fails
        When: update runs
        Then: UPDATE_INVOICE_FAILED, rollback, invoice row not written
        """
        mock_item_repo.create = AsyncMock(side_effect=Exception("disk full"))
        items = [
            {"id": "11", "name": "Consulting", "quantity": 2, "unit_price": "100.00"},
            {"id": "12", "name": "Support", "quantity": 1, "unit_price": "50.00"},
            {"name": "Extra", "quantity": 1, "unit_price": "1.00"},
        ]

        result = await update_invoice_use_case.execute(command(items=items))

        assert result.is_err()
        assert result.error.code == "UPDATE_INVOICE_FAILED"
        assert mock_item_repo.update.call_count == 2
        mock_invoice_repo.update.assert_not_called()
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()

    async def test_cancellation_rolls_back_and_propagates(
        self, update_invoice_use_case, mock_item_repo, mock_uow
    ):
        mock_item_repo.delete = AsyncMock(side_effect=asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await update_invoice_use_case.execute(command(items=[]))

        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()
