"""Invoice Item Repository Interface

Defines the contract for invoice line item persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence
from src.domain.invoice_item import InvoiceItem


class InvoiceItemRepository(ABC):
    """
    Repository interface for InvoiceItem persistence

    Provides access to invoice line items for invoicing operations.
    """

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: int) -> List[InvoiceItem]:
        """
        Retrieve all line items for an invoice, in display order

        Args:
            invoice_id: Invoice ID

        Returns:
            List of InvoiceItem rows
        """
        pass

    @abstractmethod
    async def get_by_invoice_ids(self, invoice_ids: Sequence[int]) -> List[InvoiceItem]:
        """Line items of several invoices in one query, ordered by invoice then display order"""
        pass

    @abstractmethod
    async def create(self, item: InvoiceItem) -> InvoiceItem:
        """
        Create a new line item

        Args:
            item: InvoiceItem entity to persist

        Returns:
            Created InvoiceItem with generated ID
        """
        pass

    @abstractmethod
    async def update(self, item: InvoiceItem) -> InvoiceItem:
        pass

    @abstractmethod
    async def delete(self, item: InvoiceItem) -> None:
        pass

    @abstractmethod
    async def delete_by_invoice_id(self, invoice_id: int) -> int:
        """Delete every item of an invoice, returning the number removed"""
        pass
