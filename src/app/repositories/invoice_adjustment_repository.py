"""Invoice Adjustment Repository Interface

Defines the contract for invoice adjustment persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence
from src.domain.invoice_adjustment import InvoiceAdjustment


class InvoiceAdjustmentRepository(ABC):
    """Repository interface for InvoiceAdjustment persistence"""

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: int) -> List[InvoiceAdjustment]:
        """
        Retrieve all adjustments for an invoice, in display order

        Args:
            invoice_id: Invoice ID

        Returns:
            List of InvoiceAdjustment rows
        """
        pass

    @abstractmethod
    async def get_by_invoice_ids(self, invoice_ids: Sequence[int]) -> List[InvoiceAdjustment]:
        pass

    @abstractmethod
    async def create(self, adjustment: InvoiceAdjustment) -> InvoiceAdjustment:
        pass

    @abstractmethod
    async def update(self, adjustment: InvoiceAdjustment) -> InvoiceAdjustment:
        pass

    @abstractmethod
    async def delete(self, adjustment: InvoiceAdjustment) -> None:
        pass

    @abstractmethod
    async def delete_by_invoice_id(self, invoice_id: int) -> int:
        pass
