"""Invoice Model — nested invoice built from flat stored-procedure rows.

Invariants:
    - CustomerSummary and OrderSummary are frozen: captured once per invoice, never overwritten
    - Invoice.line_items keeps the order rows were observed in
    - to_response() emits the camelCase wire names of the source rows

Design Decisions:
    - Dataclasses over Pydantic: core stays free of framework imports, and the
      row values (Decimal, datetime, UUID) are passed through untouched for
      FastAPI's jsonable_encoder
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from orderdesk.core.field_resolution import ORDER_CUSTOMER_ID_SOURCES, resolve_first


@dataclass(frozen=True)
class CustomerSummary:
    customer_id: Any
    customer_name: Any
    customer_address1: Any
    customer_address2: Any
    customer_city: Any
    customer_state: Any
    customer_postal_code: Any
    customer_telephone: Any
    customer_contact_name: Any
    customer_email_address: Any

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CustomerSummary":
        return cls(
            customer_id=row.get("customerId"),
            customer_name=row.get("customerName"),
            customer_address1=row.get("customerAddress1"),
            customer_address2=row.get("customerAddress2"),
            customer_city=row.get("customerCity"),
            customer_state=row.get("customerState"),
            customer_postal_code=row.get("customerPostalCode"),
            customer_telephone=row.get("customerTelephone"),
            customer_contact_name=row.get("customerContactName"),
            customer_email_address=row.get("customerEmailAddress"),
        )

    def to_response(self) -> dict:
        return {
            "customerId": self.customer_id,
            "customerName": self.customer_name,
            "customerAddress1": self.customer_address1,
            "customerAddress2": self.customer_address2,
            "customerCity": self.customer_city,
            "customerState": self.customer_state,
            "customerPostalCode": self.customer_postal_code,
            "customerTelephone": self.customer_telephone,
            "customerContactName": self.customer_contact_name,
            "customerEmailAddress": self.customer_email_address,
        }


@dataclass(frozen=True)
class OrderSummary:
    invoice_number: int
    invoice_date: Any
    customer_id: Any

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "OrderSummary":
        return cls(
            invoice_number=row.get("invoiceNumber"),
            invoice_date=row.get("invoiceDate"),
            customer_id=resolve_first(row, ORDER_CUSTOMER_ID_SOURCES),
        )

    def to_response(self) -> dict:
        return {
            "invoiceNumber": self.invoice_number,
            "invoiceDate": self.invoice_date,
            "customerId": self.customer_id,
        }


@dataclass(frozen=True)
class LineItem:
    line_item_id: Any
    product_id: Any
    quantity: Any
    invoice_date: Any
    product_name: Any
    product_cost: Any
    total_cost: Any

    def to_response(self) -> dict:
        return {
            "lineItemId": self.line_item_id,
            "productId": self.product_id,
            "quantity": self.quantity,
            "invoiceDate": self.invoice_date,
            "productName": self.product_name,
            "productCost": self.product_cost,
            "totalCost": self.total_cost,
        }


@dataclass
class Invoice:
    customer: CustomerSummary
    order: OrderSummary
    line_items: list[LineItem] = field(default_factory=list)

    @property
    def invoice_number(self) -> int:
        return self.order.invoice_number

    def to_response(self) -> dict:
        return {
            "customerDetail": self.customer.to_response(),
            "orderDetail": self.order.to_response(),
            "lineItems": [item.to_response() for item in self.line_items],
        }
