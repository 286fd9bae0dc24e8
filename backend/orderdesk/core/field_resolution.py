"""Field Resolution — ordered fallback lookups over untyped request payloads and rows.

Invariants:
    - A field is absent when missing, None, or the empty string
    - resolve_first tries sources in declaration order; first non-absent value wins
    - Lookup through a non-mapping intermediate (e.g. invoiceData is a string) is absent

Design Decisions:
    - Precedence lives in the *_SOURCES tuples below, declared once per field,
      so callers never chain `or` expressions inline
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldSource:
    """One named extraction strategy: a key path into a nested mapping."""
    name: str
    path: tuple[str, ...]

    def extract(self, source: Any) -> Any:
        current = source
        for key in self.path:
            if not isinstance(current, Mapping):
                return None
            current = current.get(key)
        return current


def is_absent(value: Any) -> bool:
    return value is None or value == ""


def resolve_first(source: Any, sources: tuple[FieldSource, ...]) -> Any:
    """Return the first non-absent value across sources, or None."""
    for candidate in sources:
        value = candidate.extract(source)
        if not is_absent(value):
            return value
    return None


# ─── Order-creation payload ──────────────────────────────────────

CUSTOMER_ID_SOURCES = (
    FieldSource("customerId", ("customerId",)),
    FieldSource("invoiceData.customerId", ("invoiceData", "customerId")),
)

INVOICE_DATE_SOURCES = (
    FieldSource("invoiceDate", ("invoiceDate",)),
    FieldSource("invoiceData.invoiceDate", ("invoiceData", "invoiceDate")),
)

# "products" is the shape the public examples use; the others are older clients
LINE_ITEM_SOURCES = (
    FieldSource("products", ("products",)),
    FieldSource("lineItems", ("lineItems",)),
    FieldSource("items", ("items",)),
)


# ─── Flat result rows ────────────────────────────────────────────

# Some flat procedures carry orderCustomerId; the row's customerId is the fallback
ORDER_CUSTOMER_ID_SOURCES = (
    FieldSource("orderCustomerId", ("orderCustomerId",)),
    FieldSource("customerId", ("customerId",)),
)
