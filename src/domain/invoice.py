"""Invoice Domain Entity

Customer invoice owned by a single user. Monetary fields are stored in
minor currency units (cents) and are always derived from the invoice's
items, adjustments and tax rate.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, DateTime, Integer, Numeric, String, UniqueConstraint
from src.domain.base import BaseModel, IdType, utc_now


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"


class Invoice(BaseModel, table=True):
    """
    Invoice - Customer invoice with line items and adjustments

    Domain Rules:
    - invoice_number is unique per owner (INV-YYYYMM-NNN)
    - subtotal = sum(item.quantity * item.unit_price)
    - adjustments_total = sum(additions) - sum(deductions)
    - tax_amount = floor(subtotal * tax_rate / 100)
    - total = subtotal + tax_amount + adjustments_total
    - version is bumped on every update (optimistic concurrency)
    """

    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint("owner_id", "invoice_number", name="uq_invoices_owner_number"),
        Index("ix_invoices_owner_id", "owner_id"),
        Index("ix_invoices_status", "status"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique invoice identifier (auto-increment)"
    )

    owner_id: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Owning user ID"
    )

    invoice_number: str = Field(
        sa_column=Column(String(32), nullable=False),
        description="Per-owner invoice number (e.g., INV-202401-001)"
    )

    customer_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Customer name"
    )

    customer_email: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Customer email"
    )

    due_date: Optional[date] = Field(
        default=None,
        description="Optional payment due date"
    )

    tax_rate: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(7, 4), nullable=False, default=0),
        description="Tax rate as a percentage (e.g., 11.5 for 11.5%)"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.DRAFT,
        description="Invoice status (draft, sent, paid)"
    )

    subtotal: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Sum of line item amounts (minor units)"
    )

    tax_amount: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Tax on subtotal, truncated (minor units)"
    )

    adjustments_total: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Additions minus deductions (minor units)"
    )

    total: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Grand total (minor units)"
    )

    bank_account_id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, nullable=True),
        description="Bank account shown on the invoice for payment"
    )

    version: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, default=1),
        description="Row version, incremented on every update"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp"
    )
