"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - InvoiceNumber is a positive int, the grouping and sort key for invoices
    - CustomerId / ProductId are canonical 8-4-4-4-12 hex GUID strings
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

import re
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

InvoiceNumber = NewType("InvoiceNumber", int)
CustomerId = NewType("CustomerId", str)
ProductId = NewType("ProductId", str)

GUID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)


def is_guid(value: object) -> bool:
    """True for a string in canonical hyphenated GUID form."""
    return isinstance(value, str) and GUID_PATTERN.fullmatch(value) is not None


# ─── Enums ───────────────────────────────────────────────────────

class ParamType(str, Enum):
    """SQL types a stored-procedure parameter can be bound as."""
    INT = "int"
    UNIQUE_IDENTIFIER = "uniqueidentifier"
    NVARCHAR_MAX = "nvarchar(max)"
    DATETIME2 = "datetime2"


class DataErrorCategory(str, Enum):
    """Structured classification of a data-layer failure."""
    REFERENCE_MISSING = "reference_missing"
    INFRASTRUCTURE = "infrastructure"
