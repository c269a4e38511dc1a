from .base import BaseModel
from .invoice import Invoice, InvoiceStatus
from .invoice_item import InvoiceItem
from .invoice_adjustment import InvoiceAdjustment, AdjustmentKind

__all__ = [
    "BaseModel",
    "Invoice",
    "InvoiceStatus",
    "InvoiceItem",
    "InvoiceAdjustment",
    "AdjustmentKind",
]
