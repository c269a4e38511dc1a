"""Data Transfer Objects for Invoicing Use Cases

Pydantic models for command inputs and response outputs. Monetary inputs are
major-unit decimals; responses convert stored minor units back to decimals.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Optional
from pydantic import AfterValidator, BaseModel, EmailStr, Field, field_validator

from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_adjustment import AdjustmentKind, InvoiceAdjustment
from src.domain.invoice_item import InvoiceItem
from src.domain.money import from_minor_units


# Stored ids are signed 64-bit integers
MAX_ID_DIGITS = 18


def _validate_opaque_id(v: Optional[str]) -> Optional[str]:
    if v is None or v == "":
        return v
    if not (v.isascii() and v.isdigit()) or len(v) > MAX_ID_DIGITS:
        raise ValueError("Identifier must be a numeric string")
    return v


OpaqueId = Annotated[Optional[str], AfterValidator(_validate_opaque_id)]

# Every derived total fits a signed 64-bit column:
# 500 lines x 1,000,000 units x 10,000,000.00 with tax below 1000%
MAX_QUANTITY = 1_000_000
MAX_AMOUNT = Decimal("10000000")
MAX_CHILDREN = 500

# Matches the Numeric(7, 4) tax_rate column
TAX_RATE_MAX_DIGITS = 7
TAX_RATE_DECIMAL_PLACES = 4


class InvoiceItemInputDTO(BaseModel):
    """
    Line item as supplied by the client

    id is absent for new items and set to update an existing one.
    """

    id: OpaqueId = Field(
        default=None,
        description="Existing item ID (omit to create a new item)"
    )

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Item name"
    )

    description: str = Field(
        default="",
        description="Item description"
    )

    quantity: int = Field(
        ...,
        gt=0,
        le=MAX_QUANTITY,
        description="Quantity (must be > 0)"
    )

    unit_price: Decimal = Field(
        ...,
        ge=0,
        le=MAX_AMOUNT,
        allow_inf_nan=False,
        description="Price per unit in major units (e.g., '12.50')"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "id": "12",
                "name": "Consulting",
                "description": "Architecture review",
                "quantity": 2,
                "unit_price": "100.00"
            }
        }


class InvoiceAdjustmentInputDTO(BaseModel):
    """Adjustment as supplied by the client"""

    id: OpaqueId = Field(
        default=None,
        description="Existing adjustment ID (omit to create a new adjustment)"
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Adjustment description"
    )

    kind: AdjustmentKind = Field(
        ...,
        description="Adjustment kind (addition, deduction)"
    )

    amount: Decimal = Field(
        ...,
        ge=0,
        le=MAX_AMOUNT,
        allow_inf_nan=False,
        description="Adjustment amount in major units (must be >= 0)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "description": "Early payment discount",
                "kind": "deduction",
                "amount": "2.00"
            }
        }


class CreateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for creating an invoice

    Used as input to CreateInvoice use case.
    """

    owner_id: int = Field(
        ...,
        description="Owning user ID (from the authenticated session)"
    )

    customer_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Customer name"
    )

    customer_email: EmailStr = Field(
        ...,
        description="Customer email"
    )

    due_date: Optional[date] = Field(
        default=None,
        description="Optional due date (YYYY-MM-DD)"
    )

    tax_rate: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        max_digits=TAX_RATE_MAX_DIGITS,
        decimal_places=TAX_RATE_DECIMAL_PLACES,
        allow_inf_nan=False,
        description="Tax rate percentage (must be >= 0)"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.DRAFT,
        description="Initial status (draft, sent, paid)"
    )

    items: List[InvoiceItemInputDTO] = Field(
        ...,
        min_length=1,
        max_length=MAX_CHILDREN,
        description="Line items (at least one)"
    )

    adjustments: List[InvoiceAdjustmentInputDTO] = Field(
        default_factory=list,
        max_length=MAX_CHILDREN,
        description="Additions and deductions"
    )

    bank_account_id: OpaqueId = Field(
        default=None,
        description="Bank account to show for payment"
    )


class UpdateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for updating an invoice

    Patch semantics: a field that was not sent is left untouched; a field
    that was sent overwrites. Presence is read from model_fields_set, so
    items=[] (sent, empty) removes every item while an absent items field
    keeps them.
    """

    owner_id: int = Field(..., description="Owning user ID")
    invoice_id: int = Field(..., description="Invoice ID")

    customer_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    customer_email: Optional[EmailStr] = Field(default=None)
    due_date: Optional[date] = Field(
        default=None,
        description="New due date; null clears it"
    )
    tax_rate: Optional[Decimal] = Field(
        default=None,
        ge=0,
        max_digits=TAX_RATE_MAX_DIGITS,
        decimal_places=TAX_RATE_DECIMAL_PLACES,
        allow_inf_nan=False,
    )
    status: Optional[InvoiceStatus] = Field(default=None)
    items: Optional[List[InvoiceItemInputDTO]] = Field(
        default=None,
        max_length=MAX_CHILDREN,
        description="Full desired item list; [] removes all items"
    )
    adjustments: Optional[List[InvoiceAdjustmentInputDTO]] = Field(
        default=None,
        max_length=MAX_CHILDREN,
        description="Full desired adjustment list; [] removes all adjustments"
    )
    bank_account_id: OpaqueId = Field(
        default=None,
        description="New bank account; null clears it"
    )
    version: Optional[int] = Field(
        default=None,
        description="Version the client last read; rejects stale writes when set"
    )

    @field_validator("customer_name", "customer_email", "tax_rate", "status", "items", "adjustments")
    @classmethod
    def reject_explicit_null(cls, v, info):
        """Only due_date and bank_account_id may be cleared with null"""
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    def is_set(self, field_name: str) -> bool:
        return field_name in self.model_fields_set


class InvoiceItemResponseDTO(BaseModel):
    id: str
    name: str
    description: str
    quantity: int
    unit_price: Decimal
    amount: Decimal = Field(..., description="quantity * unit_price")

    @classmethod
    def from_entity(cls, item: InvoiceItem) -> "InvoiceItemResponseDTO":
        return cls(
            id=str(item.id),
            name=item.name,
            description=item.description,
            quantity=item.quantity,
            unit_price=from_minor_units(item.unit_price),
            amount=from_minor_units(item.quantity * item.unit_price),
        )


class InvoiceAdjustmentResponseDTO(BaseModel):
    id: str
    description: str
    kind: str
    amount: Decimal

    @classmethod
    def from_entity(cls, adjustment: InvoiceAdjustment) -> "InvoiceAdjustmentResponseDTO":
        return cls(
            id=str(adjustment.id),
            description=adjustment.description,
            kind=AdjustmentKind(adjustment.kind).value,
            amount=from_minor_units(adjustment.amount),
        )


class InvoiceResponseDTO(BaseModel):
    """
    Response DTO for invoice operations

    Returned by CreateInvoice, UpdateInvoice and GetInvoice.
    """

    id: str
    invoice_number: str
    customer_name: str
    customer_email: str
    due_date: Optional[date] = None
    tax_rate: Decimal
    status: str
    subtotal: Decimal
    tax_amount: Decimal
    adjustments_total: Decimal
    total: Decimal
    bank_account_id: Optional[str] = None
    version: int
    items: List[InvoiceItemResponseDTO] = Field(default_factory=list)
    adjustments: List[InvoiceAdjustmentResponseDTO] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entities(
        cls,
        invoice: Invoice,
        items: List[InvoiceItem],
        adjustments: List[InvoiceAdjustment],
    ) -> "InvoiceResponseDTO":
        return cls(
            id=str(invoice.id),
            invoice_number=invoice.invoice_number,
            customer_name=invoice.customer_name,
            customer_email=invoice.customer_email,
            due_date=invoice.due_date,
            tax_rate=invoice.tax_rate,
            status=InvoiceStatus(invoice.status).value,
            subtotal=from_minor_units(invoice.subtotal),
            tax_amount=from_minor_units(invoice.tax_amount),
            adjustments_total=from_minor_units(invoice.adjustments_total),
            total=from_minor_units(invoice.total),
            bank_account_id=str(invoice.bank_account_id) if invoice.bank_account_id is not None else None,
            version=invoice.version,
            items=[InvoiceItemResponseDTO.from_entity(i) for i in items],
            adjustments=[InvoiceAdjustmentResponseDTO.from_entity(a) for a in adjustments],
            created_at=invoice.created_at,
            updated_at=invoice.updated_at,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "id": "1",
                "invoice_number": "INV-202401-001",
                "customer_name": "Acme Corp",
                "customer_email": "billing@example.com",
                "due_date": "2024-02-15",
                "tax_rate": "10",
                "status": "draft",
                "subtotal": "250.00",
                "tax_amount": "25.00",
                "adjustments_total": "0.00",
                "total": "275.00",
                "bank_account_id": None,
                "version": 1,
                "items": [],
                "adjustments": [],
                "created_at": "2024-01-10T09:00:00Z",
                "updated_at": "2024-01-10T09:00:00Z"
            }
        }


class InvoiceListResponseDTO(BaseModel):
    """Response DTO for ListInvoices"""

    invoices: List[InvoiceResponseDTO]
    limit: int
    offset: int
    count: int


class InvoiceDeletedResponseDTO(BaseModel):
    """Response DTO for DeleteInvoice"""

    id: str
    message: str = "invoice deleted successfully"
