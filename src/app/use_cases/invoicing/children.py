"""Conversion of client-supplied children into stored rows.

Monetary amounts are converted to minor units here, once, before any total
is computed.
"""

from src.domain.invoice_adjustment import AdjustmentKind, InvoiceAdjustment
from src.domain.invoice_item import InvoiceItem
from src.domain.money import to_minor_units
from .dtos import InvoiceAdjustmentInputDTO, InvoiceItemInputDTO


def new_item(position: int, dto: InvoiceItemInputDTO) -> InvoiceItem:
    return InvoiceItem(
        position=position,
        name=dto.name,
        description=dto.description,
        quantity=dto.quantity,
        unit_price=to_minor_units(dto.unit_price),
    )


def overwrite_item(item: InvoiceItem, position: int, dto: InvoiceItemInputDTO) -> InvoiceItem:
    item.position = position
    item.name = dto.name
    item.description = dto.description
    item.quantity = dto.quantity
    item.unit_price = to_minor_units(dto.unit_price)
    return item


def new_adjustment(position: int, dto: InvoiceAdjustmentInputDTO) -> InvoiceAdjustment:
    return InvoiceAdjustment(
        position=position,
        description=dto.description,
        kind=AdjustmentKind(dto.kind),
        amount=to_minor_units(dto.amount),
    )


def overwrite_adjustment(
    adjustment: InvoiceAdjustment, position: int, dto: InvoiceAdjustmentInputDTO
) -> InvoiceAdjustment:
    adjustment.position = position
    adjustment.description = dto.description
    adjustment.kind = AdjustmentKind(dto.kind)
    adjustment.amount = to_minor_units(dto.amount)
    return adjustment
