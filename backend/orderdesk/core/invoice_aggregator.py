"""Invoice Aggregation — folds denormalized join rows into nested invoices.

Invariants:
    - One Invoice per distinct invoice number; summaries come from the first row seen
    - A row without a line item id never yields a LineItem (LEFT JOIN placeholder)
    - aggregate_flat_rows output is sorted ascending by invoice number
    - Line items keep their relative input order within an invoice
    - Single pass over the input, no IO

Design Decisions:
    - dict (insertion-ordered) for grouping, then an explicit stable sort;
      the grouping map's iteration order is never the output contract
    - line_item_from_row is shared by the flat and detail paths so the
      discriminator and field mapping exist once
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from orderdesk.core.errors import InvoiceNotFoundError
from orderdesk.core.field_resolution import is_absent
from orderdesk.core.invoice import CustomerSummary, Invoice, LineItem, OrderSummary

Row = Mapping[str, Any]


def has_line_item(row: Row | None) -> bool:
    """Line-item discriminator: a non-empty lineItemId."""
    return row is not None and not is_absent(row.get("lineItemId"))


def line_item_from_row(row: Row) -> LineItem:
    return LineItem(
        line_item_id=row.get("lineItemId"),
        product_id=row.get("productId"),
        quantity=row.get("quantity"),
        invoice_date=row.get("invoiceDate"),
        product_name=row.get("productName"),
        product_cost=row.get("productCost"),
        total_cost=row.get("totalCost"),
    )


def aggregate_flat_rows(rows: Iterable[Row]) -> list[Invoice]:
    """Group flat invoice/line-item rows into invoices sorted by invoice number."""
    by_invoice: dict[Any, Invoice] = {}

    for row in rows:
        invoice_number = row.get("invoiceNumber")
        invoice = by_invoice.get(invoice_number)
        if invoice is None:
            invoice = Invoice(
                customer=CustomerSummary.from_row(row),
                order=OrderSummary.from_row(row),
            )
            by_invoice[invoice_number] = invoice

        if has_line_item(row):
            invoice.line_items.append(line_item_from_row(row))

    return sorted(by_invoice.values(), key=lambda inv: inv.invoice_number)


def aggregate_detail(
    customer_rows: Sequence[Row],
    order_rows: Sequence[Row],
    line_item_rows: Iterable[Row | None],
    invoice_number: int | None = None,
) -> Invoice:
    """Assemble one invoice from the three result sets of a detail lookup.

    Raises InvoiceNotFoundError when either the customer or the order
    result set is empty.
    """
    customer_row = customer_rows[0] if customer_rows else None
    order_row = order_rows[0] if order_rows else None
    if not customer_row or not order_row:
        raise InvoiceNotFoundError(invoice_number)

    return Invoice(
        customer=CustomerSummary.from_row(customer_row),
        order=OrderSummary.from_row(order_row),
        line_items=[
            line_item_from_row(row) for row in line_item_rows if has_line_item(row)
        ],
    )
