"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Optional, List
from datetime import datetime, timezone
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.base import utc_now
from src.domain.invoice import Invoice, InvoiceStatus


def _month_bounds(year: int, month: int):
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def format_invoice_number(year: int, month: int, sequence: int) -> str:
    return f"INV-{year}{month:02d}-{sequence:03d}"


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Uses async session for database operations. Writes are flushed, never
    committed; the unit of work owns the transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, invoice_id: int, for_update: bool = False) -> Optional[Invoice]:
        """
        Retrieve invoice by ID with optional row-level locking

        Args:
            invoice_id: Invoice ID
            for_update: If True, locks the row with SELECT FOR UPDATE
                (serialises concurrent updates of the same invoice)

        Returns:
            Invoice if found, None otherwise
        """
        statement = select(Invoice).where(Invoice.id == invoice_id)

        if for_update:
            statement = statement.with_for_update()

        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_owner_id(
        self,
        owner_id: int,
        status: Optional[InvoiceStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Invoice]:
        statement = select(Invoice).where(Invoice.owner_id == owner_id)

        if status:
            statement = statement.where(Invoice.status == status)

        statement = statement.order_by(Invoice.created_at.desc(), Invoice.id.desc())
        statement = statement.limit(limit).offset(offset)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def update(self, invoice: Invoice) -> Invoice:
        invoice.updated_at = utc_now()
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def delete(self, invoice: Invoice) -> None:
        await self.session.delete(invoice)
        await self.session.flush()

    async def count_for_month(self, owner_id: int, year: int, month: int) -> int:
        start, end = _month_bounds(year, month)
        statement = (
            select(func.count())
            .select_from(Invoice)
            .where(Invoice.owner_id == owner_id)
            .where(Invoice.created_at >= start)
            .where(Invoice.created_at < end)
        )
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def number_exists(self, owner_id: int, invoice_number: str) -> bool:
        statement = (
            select(func.count())
            .select_from(Invoice)
            .where(Invoice.owner_id == owner_id)
            .where(Invoice.invoice_number == invoice_number)
        )
        result = await self.session.execute(statement)
        return result.scalar_one() > 0

    async def next_invoice_number(self, owner_id: int, now: datetime) -> str:
        """
        Allocate the next invoice number for an owner

        Format: INV-YYYYMM-NNN (e.g., INV-202401-001)

        The sequence starts at one more than this month's invoice count and
        skips numbers already taken (deleted invoices leave gaps in the
        count). Concurrent creators can still pick the same number; the
        unique constraint rejects the second insert.
        """
        sequence = await self.count_for_month(owner_id, now.year, now.month) + 1
        invoice_number = format_invoice_number(now.year, now.month, sequence)

        while await self.number_exists(owner_id, invoice_number):
            sequence += 1
            invoice_number = format_invoice_number(now.year, now.month, sequence)

        return invoice_number
