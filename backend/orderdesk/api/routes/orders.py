"""Order Routes — listing, invoice detail, and order creation.

Invariants:
    - Every route requires a valid x-api-key (router-level dependency)
    - Routes never contain business logic (delegate to OrderService)
    - Create returns text/plain `New Invoice Added: <n>`

Design Decisions:
    - Create body is accepted as untyped JSON: the validator owns field
      fallbacks and rule ordering, not Pydantic
    - invoiceNumber path segment parsed by core.parse_invoice_number so a
      bad value is a VALIDATION_ERROR with its own rule, like the body rules
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse

from orderdesk.api.dependencies import get_order_service, require_api_key
from orderdesk.core.order_validator import parse_invoice_number
from orderdesk.services.order_service import OrderService

router = APIRouter(
    prefix="/api/order", tags=["orders"],
    dependencies=[Depends(require_api_key)],
)


@router.get("/viewall")
async def view_all_orders(service: OrderService = Depends(get_order_service)):
    """Order headers as returned by the procedure."""
    return await service.list_orders()


@router.get("/vieworderdetail")
async def view_all_orders_with_details(
    service: OrderService = Depends(get_order_service),
):
    """All invoices with customer, order and line items, ascending by invoice number."""
    invoices = await service.list_orders_with_details()
    return [invoice.to_response() for invoice in invoices]


@router.get("/details/{invoice_number}")
async def get_order_details(
    invoice_number: str, service: OrderService = Depends(get_order_service),
):
    """One invoice, or 404 when the order does not exist."""
    number = parse_invoice_number(invoice_number)
    invoice = await service.get_order_details(number)
    return invoice.to_response()


@router.post("/new", response_class=PlainTextResponse)
async def create_order(
    payload: Any = Body(None),
    service: OrderService = Depends(get_order_service),
):
    """Create an order from `{customerId, invoiceDate?, products: [...]}` or the invoiceData shape."""
    invoice_number = await service.create_order(payload)
    return PlainTextResponse(f"New Invoice Added: {invoice_number}")
