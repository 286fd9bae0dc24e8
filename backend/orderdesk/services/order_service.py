"""Order Service — orchestrates procedure calls around the pure aggregation and validation core.

Invariants:
    - Validation runs before any procedure is called
    - Aggregation only ever sees rows returned by the executor
    - Data-layer errors propagate unchanged (already typed by the gateway)

Design Decisions:
    - Impureim sandwich: read payload → pure validate → IO create;
      IO fetch → pure aggregate → response
"""

import logging
from typing import Any

from orderdesk.core.domain_types import ParamType
from orderdesk.core.errors import DatabaseError, ErrorContext
from orderdesk.core.invoice import Invoice
from orderdesk.core.invoice_aggregator import aggregate_detail, aggregate_flat_rows
from orderdesk.core.order_validator import validate_and_normalize
from orderdesk.core.repository_protocols import (
    ProcedureExecutor, ProcedureParam, RowSet,
)

logger = logging.getLogger(__name__)

PROC_ORDER_GET_ALL = "dbo.uspOrder_GetAll"
PROC_ORDER_GET_ALL_DETAILS_FLAT = "dbo.uspOrder_GetAllInvoiceDetails_Flat"
PROC_ORDER_GET_DETAILS = "dbo.uspOrder_GetInvoiceDetails"
PROC_ORDER_CREATE = "dbo.uspOrder_Create"


def _rowset(rowsets: list[RowSet], index: int) -> RowSet:
    return rowsets[index] if len(rowsets) > index else []


class OrderService:
    """Order read and create operations."""

    def __init__(self, executor: ProcedureExecutor):
        self.executor = executor

    async def list_orders(self) -> RowSet:
        rowsets = await self.executor.execute(PROC_ORDER_GET_ALL)
        return _rowset(rowsets, 0)

    async def list_orders_with_details(self) -> list[Invoice]:
        rowsets = await self.executor.execute(PROC_ORDER_GET_ALL_DETAILS_FLAT)
        return aggregate_flat_rows(_rowset(rowsets, 0))

    async def get_order_details(self, invoice_number: int) -> Invoice:
        """Result sets: customer (1 row), order (1 row), line items (0+ rows)."""
        rowsets = await self.executor.execute(
            PROC_ORDER_GET_DETAILS,
            [ProcedureParam("invoiceNumber", invoice_number, ParamType.INT)],
        )
        return aggregate_detail(
            _rowset(rowsets, 0),
            _rowset(rowsets, 1),
            _rowset(rowsets, 2),
            invoice_number=invoice_number,
        )

    async def create_order(self, payload: Any) -> int:
        """Validate and create an order. Returns the new invoice number."""
        command = validate_and_normalize(payload)

        params = [
            ProcedureParam("customerId", command.customer_id, ParamType.UNIQUE_IDENTIFIER),
            ProcedureParam("itemsJson", command.items_json(), ParamType.NVARCHAR_MAX),
        ]
        if command.invoice_date is not None:
            params.append(
                ProcedureParam("invoiceDate", command.invoice_date, ParamType.DATETIME2),
            )

        rowsets = await self.executor.execute(PROC_ORDER_CREATE, params)
        rows = _rowset(rowsets, 0)
        invoice_number = rows[0].get("invoiceNumber") if rows else None
        if invoice_number is None:
            raise DatabaseError(
                "create returned no invoiceNumber", "execute",
                ErrorContext(procedure=PROC_ORDER_CREATE),
            )

        logger.info(
            f"Created invoice {invoice_number} with {len(command.lines)} line item(s)",
            extra={"invoice_number": invoice_number, "procedure": PROC_ORDER_CREATE},
        )
        return invoice_number
