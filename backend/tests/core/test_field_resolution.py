"""Field Resolution — ordered fallback lookups.

Tests cover:
    - first non-absent source wins
    - None and "" count as absent; falsy non-empty values do not
    - non-mapping intermediates resolve as absent
"""

from orderdesk.core.field_resolution import (
    CUSTOMER_ID_SOURCES,
    LINE_ITEM_SOURCES,
    ORDER_CUSTOMER_ID_SOURCES,
    FieldSource,
    is_absent,
    resolve_first,
)


def test_is_absent():
    assert is_absent(None)
    assert is_absent("")
    assert not is_absent(0)
    assert not is_absent([])
    assert not is_absent(False)


def test_field_source_walks_nested_path():
    source = FieldSource("a.b", ("a", "b"))
    assert source.extract({"a": {"b": 5}}) == 5
    assert source.extract({"a": "text"}) is None
    assert source.extract({}) is None
    assert source.extract(None) is None


def test_resolve_first_returns_none_when_all_absent():
    assert resolve_first({"customerId": "", "invoiceData": {}}, CUSTOMER_ID_SOURCES) is None


def test_resolve_first_respects_declaration_order():
    row = {"items": [3], "lineItems": [2], "products": [1]}
    assert resolve_first(row, LINE_ITEM_SOURCES) == [1]
    del row["products"]
    assert resolve_first(row, LINE_ITEM_SOURCES) == [2]
    del row["lineItems"]
    assert resolve_first(row, LINE_ITEM_SOURCES) == [3]


def test_empty_list_is_present_and_stops_the_chain():
    assert resolve_first({"products": [], "items": [1]}, LINE_ITEM_SOURCES) == []


def test_order_customer_id_chain():
    assert resolve_first({"orderCustomerId": "o", "customerId": "c"}, ORDER_CUSTOMER_ID_SOURCES) == "o"
    assert resolve_first({"orderCustomerId": None, "customerId": "c"}, ORDER_CUSTOMER_ID_SOURCES) == "c"
    assert resolve_first({"customerId": "c"}, ORDER_CUSTOMER_ID_SOURCES) == "c"
