"""Invoicing use cases"""
from .create_invoice import CreateInvoice
from .update_invoice import UpdateInvoice
from .get_invoice import GetInvoice
from .list_invoices import ListInvoices
from .delete_invoice import DeleteInvoice
from .dtos import (
    CreateInvoiceCommandDTO,
    UpdateInvoiceCommandDTO,
    InvoiceItemInputDTO,
    InvoiceAdjustmentInputDTO,
    InvoiceResponseDTO,
    InvoiceListResponseDTO,
    InvoiceDeletedResponseDTO,
)

__all__ = [
    "CreateInvoice",
    "UpdateInvoice",
    "GetInvoice",
    "ListInvoices",
    "DeleteInvoice",
    "CreateInvoiceCommandDTO",
    "UpdateInvoiceCommandDTO",
    "InvoiceItemInputDTO",
    "InvoiceAdjustmentInputDTO",
    "InvoiceResponseDTO",
    "InvoiceListResponseDTO",
    "InvoiceDeletedResponseDTO",
]
