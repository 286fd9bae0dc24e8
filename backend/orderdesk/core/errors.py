"""Error Hierarchy — typed, categorized exceptions for all orderdesk failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages (debug_info is never rendered)

Design Decisions:
    - Single hierarchy with OrderDeskError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    RESOURCE_NOT_FOUND = "resource_not_found"
    REFERENCE = "reference"
    DATABASE = "database"
    INTERNAL = "internal"


class ValidationRule(str, Enum):
    """Order-creation rules, in evaluation order. Each is a distinct failure."""
    CUSTOMER_ID_FORMAT = "customer_id_format"
    LINE_ITEMS_REQUIRED = "line_items_required"
    PRODUCT_ID_FORMAT = "product_id_format"
    QUANTITY_POSITIVE = "quantity_positive"
    INVOICE_DATE_FORMAT = "invoice_date_format"
    INVOICE_NUMBER_FORMAT = "invoice_number_format"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    invoice_number: int | None = None
    procedure: str | None = None
    field: str | None = None
    rule: str | None = None
    debug_info: dict[str, Any] | None = None


class OrderDeskError(Exception):
    """Base exception for all orderdesk errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "invoice_number": self.context.invoice_number,
                    "field": self.context.field,
                    "rule": self.context.rule,
                },
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class OrderValidationError(OrderDeskError):
    """Order-creation payload violated a validation rule."""
    def __init__(
        self,
        message: str,
        rule: ValidationRule,
        field: str,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.field = field
        ctx.rule = rule.value
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.rule = rule
        self.field = field


class UnauthorizedError(OrderDeskError):
    """Missing or wrong API key."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Unauthorized", "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ResourceNotFoundError(OrderDeskError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class InvoiceNotFoundError(ResourceNotFoundError):
    """Detail lookup returned no customer or no order row."""
    def __init__(self, invoice_number: int | None = None):
        super().__init__(
            "Order",
            str(invoice_number) if invoice_number is not None else "unknown",
            ErrorContext(invoice_number=invoice_number),
        )
        self.invoice_number = invoice_number


class ReferenceNotFoundError(OrderDeskError):
    """The data layer rejected a write because a referenced entity is missing."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "REFERENCE_NOT_FOUND", ErrorCategory.REFERENCE,
            ErrorSeverity.ERROR, context, 400,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(OrderDeskError):
    """Database operation failed. Detail goes to logs, not to the client."""
    def __init__(self, detail: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.debug_info = {**(ctx.debug_info or {}), "detail": detail}
        super().__init__(
            f"Database {operation} failed",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation
        self.detail = detail
