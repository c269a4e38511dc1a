"""Invoice API Routes

FastAPI routes for invoice operations. Every route requires a bearer token;
invoices are scoped to the authenticated user.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Result
from src.api.auth import AuthenticatedUser, get_current_user
from src.api.error import ClientError
from src.api.schemas.invoice_request import CreateInvoiceRequestSchema, UpdateInvoiceRequestSchema
from src.app.use_cases.invoicing import (
    CreateInvoice,
    CreateInvoiceCommandDTO,
    DeleteInvoice,
    GetInvoice,
    InvoiceDeletedResponseDTO,
    InvoiceListResponseDTO,
    InvoiceResponseDTO,
    ListInvoices,
    UpdateInvoice,
    UpdateInvoiceCommandDTO,
)
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.invoice_item_repository import SqlAlchemyInvoiceItemRepository
from src.adapter.repositories.invoice_adjustment_repository import SqlAlchemyInvoiceAdjustmentRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.invoice import InvoiceStatus
from src.depends import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["Invoices"])

STATUS_BY_ERROR_CODE = {
    "INVOICE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVOICE_ITEM_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVOICE_ADJUSTMENT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ACCESS_DENIED": status.HTTP_403_FORBIDDEN,
    "INVOICE_VERSION_CONFLICT": status.HTTP_409_CONFLICT,
    "INVOICE_NUMBER_CONFLICT": status.HTTP_409_CONFLICT,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "CREATE_INVOICE_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "UPDATE_INVOICE_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "DELETE_INVOICE_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "GET_INVOICE_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "LIST_INVOICES_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

ERROR_RESPONSES = {
    404: {
        "description": "Invoice not found",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "INVOICE_NOT_FOUND",
                        "message": "Invoice with ID 123 not found"
                    }
                }
            }
        }
    },
    403: {
        "description": "Invoice belongs to another user",
        "content": {
            "application/json": {
                "example": {"error": {"code": "ACCESS_DENIED", "message": "access denied"}}
            }
        }
    },
}


def unwrap(result: Result):
    """Return the value of a successful result or raise the mapped ClientError"""
    if result.is_err():
        raise ClientError(
            result.error,
            status_code=STATUS_BY_ERROR_CODE.get(result.error.code, status.HTTP_400_BAD_REQUEST),
        )
    return result.value


def _repositories(session: AsyncSession):
    return (
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceItemRepository(session),
        SqlAlchemyInvoiceAdjustmentRepository(session),
    )


@router.get("", response_model=InvoiceListResponseDTO, status_code=status.HTTP_200_OK)
async def list_invoices(
    status_filter: Optional[InvoiceStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """
    List the authenticated user's invoices, newest first.

    **Query parameters:**
    - `status` (optional): draft, sent or paid
    - `limit` (optional): page size, 1-100 (default 20)
    - `offset` (optional): page offset (default 0)
    """
    use_case = ListInvoices(*_repositories(session))
    return unwrap(await use_case.execute(user.id, status=status_filter, limit=limit, offset=offset))


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
)
async def get_invoice(
    invoice_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """
    Get one invoice with its items and adjustments.

    **Returns:**
    - 200: Invoice found
    - 403: Invoice belongs to another user
    - 404: Invoice not found
    """
    use_case = GetInvoice(*_repositories(session))
    return unwrap(await use_case.execute(user.id, invoice_id))


@router.post(
    "",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "Invoice number conflict after retries",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVOICE_NUMBER_CONFLICT",
                            "message": "Invoice number was taken by a concurrent request, retry"
                        }
                    }
                }
            }
        }
    },
)
async def create_invoice(
    request: CreateInvoiceRequestSchema,
    user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """
    Create an invoice with its items and adjustments.

    Totals are computed by the server from the items, adjustments and tax
    rate; the invoice number (INV-YYYYMM-NNN) is assigned automatically.

    **Example request:**
    ```json
    {
      "customer_name": "Acme Corp",
      "customer_email": "billing@example.com",
      "tax_rate": "10",
      "items": [
        {"name": "Consulting", "quantity": 2, "unit_price": "100.00"},
        {"name": "Support", "quantity": 1, "unit_price": "50.00"}
      ]
    }
    ```

    **Returns:**
    - 201: Invoice created (subtotal 250.00, tax 25.00, total 275.00 for the example)
    - 400: Invalid request parameters
    - 409: Invoice number still conflicting after retries
    """
    command = CreateInvoiceCommandDTO(owner_id=user.id, **request.model_dump())
    use_case = CreateInvoice(SqlAlchemyUnitOfWork(session), *_repositories(session))

    # Concurrent creations may race on the monthly sequence; retry on conflict
    max_attempts = max(1, int(ApplicationConfig.INVOICE_NUMBER_MAX_ATTEMPTS))
    for attempt in range(1, max_attempts + 1):
        result = await use_case.execute(command)
        if result.is_ok() or result.error.code != "INVOICE_NUMBER_CONFLICT":
            break
        logger.warning(
            f"Invoice number conflict for user {user.id} (attempt {attempt}/{max_attempts})"
        )

    return unwrap(result)


@router.put(
    "/{invoice_id}",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
)
async def update_invoice(
    invoice_id: int,
    request: UpdateInvoiceRequestSchema,
    user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """
    Update an invoice.

    Only the fields present in the body are changed. When `items` or
    `adjustments` is present it is the complete desired list: entries with
    an `id` overwrite that entry, entries without `id` are added, and
    entries not listed are removed. Send `version` to reject the update if
    someone else changed the invoice since it was read.

    **Returns:**
    - 200: Invoice updated, totals recomputed
    - 400: Invalid request parameters
    - 403: Invoice belongs to another user
    - 404: Invoice, item or adjustment not found
    - 409: Version conflict
    """
    command = UpdateInvoiceCommandDTO(
        owner_id=user.id,
        invoice_id=invoice_id,
        **request.model_dump(exclude_unset=True),
    )
    use_case = UpdateInvoice(SqlAlchemyUnitOfWork(session), *_repositories(session))
    return unwrap(await use_case.execute(command))


@router.delete(
    "/{invoice_id}",
    response_model=InvoiceDeletedResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
)
async def delete_invoice(
    invoice_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """Delete an invoice together with its items and adjustments."""
    use_case = DeleteInvoice(SqlAlchemyUnitOfWork(session), *_repositories(session))
    return unwrap(await use_case.execute(user.id, invoice_id))
