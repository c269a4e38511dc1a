from .invoice_repository import InvoiceRepository
from .invoice_item_repository import InvoiceItemRepository
from .invoice_adjustment_repository import InvoiceAdjustmentRepository

__all__ = [
    "InvoiceRepository",
    "InvoiceItemRepository",
    "InvoiceAdjustmentRepository",
]
