"""Order Request Validation — turns an untyped create-order payload into a typed command.

Invariants:
    - Rules run in a fixed order: customer id, line items present, each line, invoice date
    - First violation raises OrderValidationError naming the rule and field
    - Output lines carry exactly productId and quantity, in input order
    - Pure: no IO, no mutation of the payload

Design Decisions:
    - Raises instead of returning a result union: the global handler maps
      OrderValidationError to 400, separate from data-layer failures
    - Booleans are rejected as quantities even though bool subclasses int
"""

import json
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from orderdesk.core.domain_types import CustomerId, ProductId, is_guid
from orderdesk.core.errors import OrderValidationError, ValidationRule
from orderdesk.core.field_resolution import (
    CUSTOMER_ID_SOURCES,
    INVOICE_DATE_SOURCES,
    LINE_ITEM_SOURCES,
    resolve_first,
)

_DIGITS = re.compile(r"[0-9]+")

# Non-ISO forms clients send: "2024/12/20", "12/20/2024", "December 20, 2024"
_CALENDAR_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d, %Y %H:%M:%S",
)


@dataclass(frozen=True)
class OrderLine:
    product_id: ProductId
    quantity: int

    def to_payload(self) -> dict:
        return {"productId": self.product_id, "quantity": self.quantity}


@dataclass(frozen=True)
class OrderCreationCommand:
    customer_id: CustomerId
    invoice_date: datetime | None
    lines: tuple[OrderLine, ...]

    def items_json(self) -> str:
        """Line items as the single JSON blob the create procedure expects."""
        return json.dumps([line.to_payload() for line in self.lines])


def validate_and_normalize(payload: Any) -> OrderCreationCommand:
    """Validate a create-order payload. Raises OrderValidationError."""
    customer_id = resolve_first(payload, CUSTOMER_ID_SOURCES)
    raw_date = resolve_first(payload, INVOICE_DATE_SOURCES)
    raw_lines = resolve_first(payload, LINE_ITEM_SOURCES)

    if not is_guid(customer_id):
        raise OrderValidationError(
            "customerId must be a GUID",
            ValidationRule.CUSTOMER_ID_FORMAT, "customerId",
        )

    if not isinstance(raw_lines, list) or not raw_lines:
        raise OrderValidationError(
            "products must be a non-empty array",
            ValidationRule.LINE_ITEMS_REQUIRED, "products",
        )

    lines = tuple(_validate_line(index, entry) for index, entry in enumerate(raw_lines))

    return OrderCreationCommand(
        customer_id=CustomerId(customer_id),
        invoice_date=_parse_invoice_date(raw_date),
        lines=lines,
    )


def _validate_line(index: int, entry: Any) -> OrderLine:
    product_id = entry.get("productId") if isinstance(entry, dict) else None
    if not is_guid(product_id):
        raise OrderValidationError(
            f"Each products[].productId must be a GUID (products[{index}])",
            ValidationRule.PRODUCT_ID_FORMAT, f"products[{index}].productId",
        )

    quantity = _as_positive_int(entry.get("quantity"))
    if quantity is None:
        raise OrderValidationError(
            f"Each products[].quantity must be a positive integer (products[{index}])",
            ValidationRule.QUANTITY_POSITIVE, f"products[{index}].quantity",
        )

    return OrderLine(product_id=ProductId(product_id), quantity=quantity)


def _as_positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    # JSON numbers like 3.0 are integral
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and value > 0:
        return value
    return None


def _parse_invoice_date(raw: Any) -> datetime | None:
    """Parse ISO-8601, RFC 2822/1123 or a few common calendar forms.

    Offset-aware values are normalized to naive UTC, the form DATETIME2 stores.
    """
    if raw is None:
        return None
    parsed = _parse_timestamp(raw.strip()) if isinstance(raw, str) else None
    if parsed is None:
        raise OrderValidationError(
            "invoiceDate must be a valid date string",
            ValidationRule.INVOICE_DATE_FORMAT, "invoiceDate",
        )
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _parse_timestamp(text: str) -> datetime | None:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        pass
    for fmt in _CALENDAR_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_invoice_number(raw: Any) -> int:
    """Validate an invoice number from a path or query value."""
    text = str(raw).strip()
    number = int(text) if _DIGITS.fullmatch(text) else 0
    if number <= 0:
        raise OrderValidationError(
            "invoiceNumber must be a positive integer",
            ValidationRule.INVOICE_NUMBER_FORMAT, "invoiceNumber",
        )
    return number
