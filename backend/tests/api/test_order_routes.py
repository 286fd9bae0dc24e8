"""Order Routes — end-to-end through routes, service and core with a scripted executor.

Invariants:
    - vieworderdetail returns invoices sorted by invoice number
    - details/{n} returns one invoice or 404; bad n is 400
    - new returns text/plain with the new invoice number
    - validation failures never reach the executor
    - reference errors are 400, other data-layer errors 503 with a generic message
"""

import json
from datetime import datetime

from orderdesk.core.errors import DatabaseError, ReferenceNotFoundError
from orderdesk.services.order_service import (
    PROC_ORDER_CREATE,
    PROC_ORDER_GET_ALL,
    PROC_ORDER_GET_ALL_DETAILS_FLAT,
    PROC_ORDER_GET_DETAILS,
)

CUSTOMER = "550e8400-e29b-41d4-a716-446655440000"
PRODUCT = "6ba7b810-9dad-11d1-80b4-00c04fd430c8"


def _flat_row(invoice_number, line_item_id=None, product_id=None, quantity=None):
    return {
        "invoiceNumber": invoice_number,
        "customerId": CUSTOMER,
        "customerName": "Acme Traders",
        "customerAddress1": "1 Main St",
        "customerAddress2": None,
        "customerCity": "Springfield",
        "customerState": "IL",
        "customerPostalCode": "62701",
        "customerTelephone": "555-0100",
        "customerContactName": "Pat Doe",
        "customerEmailAddress": "pat@acme.test",
        "invoiceDate": datetime(2024, 12, 20, 14, 30),
        "lineItemId": line_item_id,
        "productId": product_id,
        "quantity": quantity,
        "productName": "Widget" if line_item_id else None,
        "productCost": 2.5 if line_item_id else None,
        "totalCost": 2.5 * quantity if line_item_id else None,
    }


# ─── GET /api/order/viewall ──────────────────────────────────────

async def test_view_all_orders_passes_rows_through(client, executor, auth_headers):
    executor.results[PROC_ORDER_GET_ALL] = [[
        {"invoiceNumber": 1, "customerId": CUSTOMER},
        {"invoiceNumber": 2, "customerId": CUSTOMER},
    ]]
    res = await client.get("/api/order/viewall", headers=auth_headers)
    assert res.status_code == 200
    assert [r["invoiceNumber"] for r in res.json()] == [1, 2]


# ─── GET /api/order/vieworderdetail ──────────────────────────────

async def test_view_order_detail_groups_and_sorts(client, executor, auth_headers):
    executor.results[PROC_ORDER_GET_ALL_DETAILS_FLAT] = [[
        _flat_row(2),
        _flat_row(1, "li1", "p1", 2),
        _flat_row(1, "li2", "p2", 1),
    ]]
    res = await client.get("/api/order/vieworderdetail", headers=auth_headers)

    assert res.status_code == 200
    body = res.json()
    assert [inv["orderDetail"]["invoiceNumber"] for inv in body] == [1, 2]
    assert [li["lineItemId"] for li in body[0]["lineItems"]] == ["li1", "li2"]
    assert body[1]["lineItems"] == []
    assert body[0]["orderDetail"]["invoiceDate"] == "2024-12-20T14:30:00"
    assert body[0]["customerDetail"]["customerName"] == "Acme Traders"
    assert body[0]["lineItems"][0]["totalCost"] == 5.0


async def test_view_order_detail_empty(client, executor, auth_headers):
    executor.results[PROC_ORDER_GET_ALL_DETAILS_FLAT] = [[]]
    res = await client.get("/api/order/vieworderdetail", headers=auth_headers)
    assert res.status_code == 200
    assert res.json() == []


# ─── GET /api/order/details/{invoiceNumber} ──────────────────────

async def test_details_returns_invoice(client, executor, auth_headers):
    executor.results[PROC_ORDER_GET_DETAILS] = [
        [{"customerId": CUSTOMER, "customerName": "Acme Traders"}],
        [{"invoiceNumber": 7, "invoiceDate": None, "customerId": CUSTOMER}],
        [{"lineItemId": None, "productId": None, "quantity": None}],
    ]
    res = await client.get("/api/order/details/7", headers=auth_headers)

    assert res.status_code == 200
    body = res.json()
    assert body["orderDetail"]["invoiceNumber"] == 7
    assert body["customerDetail"]["customerName"] == "Acme Traders"
    assert body["lineItems"] == []
    assert executor.params_of(PROC_ORDER_GET_DETAILS) == {"invoiceNumber": 7}


async def test_details_not_found(client, executor, auth_headers):
    executor.results[PROC_ORDER_GET_DETAILS] = [[], [], []]
    res = await client.get("/api/order/details/999", headers=auth_headers)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_details_not_found_when_procedure_returns_fewer_result_sets(
    client, executor, auth_headers,
):
    executor.results[PROC_ORDER_GET_DETAILS] = []
    res = await client.get("/api/order/details/3", headers=auth_headers)
    assert res.status_code == 404


async def test_details_rejects_non_positive_invoice_number(client, executor, auth_headers):
    for raw in ("0", "-1", "abc", "1.5"):
        res = await client.get(f"/api/order/details/{raw}", headers=auth_headers)
        assert res.status_code == 400, raw
        assert res.json()["error"]["message"] == "invoiceNumber must be a positive integer"
    assert executor.calls == []


# ─── POST /api/order/new ─────────────────────────────────────────

async def test_create_order_returns_plain_text(client, executor, auth_headers):
    executor.results[PROC_ORDER_CREATE] = [[{"invoiceNumber": 1001}]]
    res = await client.post(
        "/api/order/new",
        headers=auth_headers,
        json={
            "customerId": CUSTOMER,
            "invoiceDate": "2024-12-20T14:30:00",
            "lineItems": [{"productId": PRODUCT, "quantity": 2, "note": "rush"}],
        },
    )

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/plain")
    assert res.text == "New Invoice Added: 1001"

    params = executor.params_of(PROC_ORDER_CREATE)
    assert params["customerId"] == CUSTOMER
    assert json.loads(params["itemsJson"]) == [{"productId": PRODUCT, "quantity": 2}]
    assert params["invoiceDate"] == datetime(2024, 12, 20, 14, 30)


async def test_create_order_accepts_invoice_data_shape(client, executor, auth_headers):
    executor.results[PROC_ORDER_CREATE] = [[{"invoiceNumber": 1002}]]
    res = await client.post(
        "/api/order/new",
        headers=auth_headers,
        json={
            "invoiceData": {"customerId": CUSTOMER},
            "products": [{"productId": PRODUCT, "quantity": 1}],
        },
    )
    assert res.status_code == 200
    assert res.text == "New Invoice Added: 1002"
    assert "invoiceDate" not in executor.params_of(PROC_ORDER_CREATE)


async def test_create_order_validation_failure_skips_procedure(client, executor, auth_headers):
    res = await client.post(
        "/api/order/new",
        headers=auth_headers,
        json={"customerId": CUSTOMER, "products": [{"productId": PRODUCT, "quantity": 0}]},
    )
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["context"]["rule"] == "quantity_positive"
    assert executor.calls == []


async def test_create_order_without_body_is_400(client, executor, auth_headers):
    res = await client.post("/api/order/new", headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["error"]["context"]["rule"] == "customer_id_format"


async def test_create_order_reference_error_is_400(client, executor, auth_headers):
    executor.results[PROC_ORDER_CREATE] = ReferenceNotFoundError(
        "Referenced customer or product does not exist",
    )
    res = await client.post(
        "/api/order/new",
        headers=auth_headers,
        json={"customerId": CUSTOMER, "products": [{"productId": PRODUCT, "quantity": 1}]},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "REFERENCE_NOT_FOUND"


async def test_create_order_database_error_is_generic(client, executor, auth_headers):
    executor.results[PROC_ORDER_CREATE] = DatabaseError(
        "Login failed for user 'sa'", "execute",
    )
    res = await client.post(
        "/api/order/new",
        headers=auth_headers,
        json={"customerId": CUSTOMER, "products": [{"productId": PRODUCT, "quantity": 1}]},
    )
    assert res.status_code == 503
    assert "Login failed" not in res.text
    assert res.json()["error"]["code"] == "DATABASE_ERROR"


async def test_create_order_without_invoice_number_is_database_error(
    client, executor, auth_headers,
):
    executor.results[PROC_ORDER_CREATE] = [[]]
    res = await client.post(
        "/api/order/new",
        headers=auth_headers,
        json={"customerId": CUSTOMER, "products": [{"productId": PRODUCT, "quantity": 1}]},
    )
    assert res.status_code == 503
