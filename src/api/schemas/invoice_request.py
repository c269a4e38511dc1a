"""Request schemas for Invoice API

Pydantic models for validating incoming HTTP requests. Amounts are in major
currency units as decimal strings or numbers ("12.50").
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from src.app.use_cases.invoicing.dtos import (
    InvoiceAdjustmentInputDTO,
    InvoiceItemInputDTO,
    MAX_CHILDREN,
    OpaqueId,
    TAX_RATE_DECIMAL_PLACES,
    TAX_RATE_MAX_DIGITS,
)
from src.domain.invoice import InvoiceStatus


class CreateInvoiceRequestSchema(BaseModel):
    """
    Request schema for creating an invoice

    Used for POST /invoices endpoint.
    """

    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr = Field(...)
    due_date: Optional[date] = Field(default=None, description="YYYY-MM-DD")
    tax_rate: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        max_digits=TAX_RATE_MAX_DIGITS,
        decimal_places=TAX_RATE_DECIMAL_PLACES,
        allow_inf_nan=False,
    )
    status: InvoiceStatus = Field(default=InvoiceStatus.DRAFT)
    items: List[InvoiceItemInputDTO] = Field(..., min_length=1, max_length=MAX_CHILDREN)
    adjustments: List[InvoiceAdjustmentInputDTO] = Field(default_factory=list, max_length=MAX_CHILDREN)
    bank_account_id: OpaqueId = Field(default=None)

    @field_validator("items")
    @classmethod
    def validate_new_items(cls, v):
        """Items of a new invoice cannot reference existing ids"""
        if any(item.id for item in v):
            raise ValueError("New invoice items must not carry an id")
        return v

    @field_validator("adjustments")
    @classmethod
    def validate_new_adjustments(cls, v):
        if any(adj.id for adj in v):
            raise ValueError("New invoice adjustments must not carry an id")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "customer_name": "Acme Corp",
                "customer_email": "billing@example.com",
                "due_date": "2024-02-15",
                "tax_rate": "10",
                "status": "draft",
                "items": [
                    {"name": "Consulting", "quantity": 2, "unit_price": "100.00"},
                    {"name": "Support", "quantity": 1, "unit_price": "50.00"}
                ],
                "adjustments": []
            }
        }


class UpdateInvoiceRequestSchema(BaseModel):
    """
    Request schema for updating an invoice

    Used for PUT /invoices/{invoice_id}. Omitted fields are left unchanged.
    items/adjustments, when sent, are the complete desired lists: entries
    with an id update that entry, entries without id are added, and stored
    entries not listed are removed ([] removes all of them).
    """

    customer_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    customer_email: Optional[EmailStr] = Field(default=None)
    due_date: Optional[date] = Field(default=None, description="null clears the due date")
    tax_rate: Optional[Decimal] = Field(
        default=None,
        ge=0,
        max_digits=TAX_RATE_MAX_DIGITS,
        decimal_places=TAX_RATE_DECIMAL_PLACES,
        allow_inf_nan=False,
    )
    status: Optional[InvoiceStatus] = Field(default=None)
    items: Optional[List[InvoiceItemInputDTO]] = Field(default=None, max_length=MAX_CHILDREN)
    adjustments: Optional[List[InvoiceAdjustmentInputDTO]] = Field(default=None, max_length=MAX_CHILDREN)
    bank_account_id: OpaqueId = Field(default=None, description="null clears the bank account")
    version: Optional[int] = Field(default=None, ge=1)

    @field_validator("customer_name", "customer_email", "tax_rate", "status", "items", "adjustments")
    @classmethod
    def reject_explicit_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "tax_rate": "11",
                "items": [
                    {"id": "1", "name": "Consulting", "quantity": 3, "unit_price": "100.00"},
                    {"name": "Travel", "quantity": 1, "unit_price": "80.00"}
                ],
                "version": 1
            }
        }
