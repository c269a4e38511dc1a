"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List
from src.domain.invoice import Invoice, InvoiceStatus


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Child rows (items, adjustments) are persisted through their own
    repositories; this one only writes the invoice row.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: int, for_update: bool = False) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_owner_id(
        self,
        owner_id: int,
        status: Optional[InvoiceStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Invoice]:
        """
        Retrieve invoices of an owner, newest first

        Args:
            owner_id: Owning user ID
            status: Optional filter by status
            limit: Maximum number of invoices to return
            offset: Offset for pagination

        Returns:
            List of invoices
        """
        pass

    @abstractmethod
    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update the invoice row (children are not written)

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        pass

    @abstractmethod
    async def delete(self, invoice: Invoice) -> None:
        pass

    @abstractmethod
    async def count_for_month(self, owner_id: int, year: int, month: int) -> int:
        """Number of invoices the owner created in the given calendar month"""
        pass

    @abstractmethod
    async def number_exists(self, owner_id: int, invoice_number: str) -> bool:
        pass

    @abstractmethod
    async def next_invoice_number(self, owner_id: int, now: datetime) -> str:
        """
        Allocate the next invoice number for an owner

        Format: INV-YYYYMM-NNN (e.g., INV-202401-001), where NNN is one more
        than the invoices the owner created this month.

        Returns:
            Candidate invoice number; uniqueness is enforced on insert
        """
        pass
