import pytest
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.invoicing.list_invoices import ListInvoices
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_adjustment import AdjustmentKind, InvoiceAdjustment
from src.domain.invoice_item import InvoiceItem


def make_invoice(invoice_id, number):
    now = datetime(2024, 1, 10, 9, 0, 0, tzinfo=timezone.utc)
    return Invoice(
        id=invoice_id, owner_id=7, invoice_number=number, customer_name="Acme Corp",
        customer_email="billing@example.com", tax_rate=Decimal("0"), status=InvoiceStatus.DRAFT,
        subtotal=0, tax_amount=0, adjustments_total=0, total=0, version=1,
        created_at=now, updated_at=now,
    )


@pytest.fixture
def repos():
    invoice_repo = MagicMock()
    invoice_repo.get_by_owner_id = AsyncMock(
        return_value=[make_invoice(2, "INV-202401-002"), make_invoice(1, "INV-202401-001")]
    )
    item_repo = MagicMock()
    item_repo.get_by_invoice_ids = AsyncMock(return_value=[])
    adjustment_repo = MagicMock()
    adjustment_repo.get_by_invoice_ids = AsyncMock(return_value=[])
    return invoice_repo, item_repo, adjustment_repo


@pytest.mark.asyncio
class TestListInvoices:
    async def test_lists_in_repository_order(self, repos):
        result = await ListInvoices(*repos).execute(owner_id=7)

        assert result.is_ok()
        assert [i.invoice_number for i in result.value.invoices] == [
            "INV-202401-002",
            "INV-202401-001",
        ]
        assert result.value.count == 2
        repos[0].get_by_owner_id.assert_called_once_with(7, status=None, limit=20, offset=0)

    async def test_children_loaded_once_per_table(self, repos):
        """
        Given: a page of two invoices with items and an adjustment
        When: invoices are listed
        Then: children are fetched in one call per table and grouped per invoice
        """
        invoice_repo, item_repo, adjustment_repo = repos
        item_repo.get_by_invoice_ids = AsyncMock(
            return_value=[
                InvoiceItem(id=10, invoice_id=1, position=0, name="A", description="",
                            quantity=1, unit_price=100),
                InvoiceItem(id=20, invoice_id=2, position=0, name="B", description="",
                            quantity=2, unit_price=50),
                InvoiceItem(id=21, invoice_id=2, position=1, name="C", description="",
                            quantity=1, unit_price=5),
            ]
        )
        adjustment_repo.get_by_invoice_ids = AsyncMock(
            return_value=[
                InvoiceAdjustment(id=30, invoice_id=1, position=0, description="Fee",
                                  kind=AdjustmentKind.ADDITION, amount=25),
            ]
        )

        result = await ListInvoices(*repos).execute(owner_id=7)

        assert result.is_ok()
        newest, oldest = result.value.invoices
        assert [i.id for i in newest.items] == ["20", "21"]
        assert newest.adjustments == []
        assert [i.id for i in oldest.items] == ["10"]
        assert [a.id for a in oldest.adjustments] == ["30"]
        item_repo.get_by_invoice_ids.assert_called_once_with([2, 1])
        adjustment_repo.get_by_invoice_ids.assert_called_once_with([2, 1])

    async def test_status_filter_passed_through(self, repos):
        await ListInvoices(*repos).execute(owner_id=7, status=InvoiceStatus.PAID)

        assert repos[0].get_by_owner_id.call_args.kwargs["status"] == InvoiceStatus.PAID

    async def test_pagination_clamped(self, repos):
        result = await ListInvoices(*repos).execute(owner_id=7, limit=1000, offset=-5)

        assert result.value.limit == 100
        assert result.value.offset == 0
        repos[0].get_by_owner_id.assert_called_once_with(7, status=None, limit=100, offset=0)

    async def test_repository_failure(self, repos):
        repos[0].get_by_owner_id = AsyncMock(side_effect=Exception("timeout"))

        result = await ListInvoices(*repos).execute(owner_id=7)

        assert result.is_err()
        assert result.error.code == "LIST_INVOICES_FAILED"
