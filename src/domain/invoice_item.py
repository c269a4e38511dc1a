"""Invoice Item Domain Entity

Tracks individual line items within an invoice.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String, Text
from src.domain.base import BaseModel, IdType, utc_now


class InvoiceItem(BaseModel, table=True):
    """
    Invoice Item - Line item within an invoice

    Domain Rules:
    - Each item belongs to exactly one invoice
    - quantity > 0, unit_price >= 0 (minor units)
    - Identity never changes and is never reused
    """

    __tablename__ = "invoice_items"
    __table_args__ = (
        Index("ix_invoice_items_invoice_id", "invoice_id"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique item identifier (auto-increment)"
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

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Item name"
    )

    description: str = Field(
        default="",
        sa_column=Column(Text, nullable=False, default=""),
        description="Item description"
    )

    quantity: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Quantity (positive integer)"
    )

    unit_price: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Price per unit (minor units)"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Item creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp"
    )
