"""Invoice Adjustment Domain Entity

Named additions or deductions applied to an invoice alongside tax.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String
from src.domain.base import BaseModel, IdType, utc_now


class AdjustmentKind(str, Enum):
    """Adjustment kinds"""
    ADDITION = "addition"
    DEDUCTION = "deduction"


class InvoiceAdjustment(BaseModel, table=True):
    """
    Invoice Adjustment - Signed amount applied to an invoice

    Domain Rules:
    - Each adjustment belongs to exactly one invoice
    - amount >= 0 (minor units); the sign comes from kind
    """

    __tablename__ = "invoice_adjustments"
    __table_args__ = (
        Index("ix_invoice_adjustments_invoice_id", "invoice_id"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique adjustment identifier (auto-increment)"
    )

    invoice_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Invoice"
    )

    position: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Display order within the invoice"
    )

    description: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Adjustment description (e.g., 'Early payment discount')"
    )

    kind: AdjustmentKind = Field(
        description="Adjustment kind (addition, deduction)"
    )

    amount: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Adjustment amount (minor units, non-negative)"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Adjustment creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp"
    )
