"""SQLAlchemy Invoice Adjustment Repository Implementation

Implements invoice adjustment persistence using SQLAlchemy async session.
"""

from typing import List, Sequence
from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_adjustment_repository import InvoiceAdjustmentRepository
from src.domain.base import utc_now
from src.domain.invoice_adjustment import InvoiceAdjustment


class SqlAlchemyInvoiceAdjustmentRepository(InvoiceAdjustmentRepository):
    """SQLAlchemy implementation of InvoiceAdjustmentRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_invoice_id(self, invoice_id: int) -> List[InvoiceAdjustment]:
        statement = (
            select(InvoiceAdjustment)
            .where(InvoiceAdjustment.invoice_id == invoice_id)
            .order_by(InvoiceAdjustment.position, InvoiceAdjustment.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_by_invoice_ids(self, invoice_ids: Sequence[int]) -> List[InvoiceAdjustment]:
        if not invoice_ids:
            return []
        statement = (
            select(InvoiceAdjustment)
            .where(InvoiceAdjustment.invoice_id.in_(invoice_ids))
            .order_by(InvoiceAdjustment.invoice_id, InvoiceAdjustment.position, InvoiceAdjustment.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def create(self, adjustment: InvoiceAdjustment) -> InvoiceAdjustment:
        self.session.add(adjustment)
        await self.session.flush()
        await self.session.refresh(adjustment)
        return adjustment

    async def update(self, adjustment: InvoiceAdjustment) -> InvoiceAdjustment:
        adjustment.updated_at = utc_now()
        self.session.add(adjustment)
        await self.session.flush()
        return adjustment

    async def delete(self, adjustment: InvoiceAdjustment) -> None:
        await self.session.delete(adjustment)
        await self.session.flush()

    async def delete_by_invoice_id(self, invoice_id: int) -> int:
        statement = delete(InvoiceAdjustment).where(InvoiceAdjustment.invoice_id == invoice_id)
        result = await self.session.execute(statement)
        return result.rowcount
