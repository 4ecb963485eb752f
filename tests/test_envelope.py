from conftest import RecordingTransport, load_client
from restsynth.runtime import HttpEntity
from sample_api import Order

ORDER = {"name": "Order", "module": "sample_api"}

ORDERS = {
    "name": "OrderWrites",
    "module": "sample_api",
    "client_name": "orders-svc",
    "base_path": "/orders",
    "methods": [
        {
            "name": "create",
            "verb": "POST",
            "path": "",
            "returns": ORDER,
            "parameters": [
                {"name": "order", "role": "body", "type": ORDER},
                {"name": "trace", "role": "header", "header_name": "X-Trace", "type": {"name": "str"}},
                {"name": "tenant", "role": "header", "type": {"name": "str"}},
            ],
        },
        {
            "name": "bulk",
            "verb": "put",
            "path": "/bulk",
            "parameters": [
                {"name": "orders", "role": "body", "type": {"name": "list", "args": [ORDER]}},
            ],
        },
        {
            "name": "ping",
            "verb": "HEAD",
            "path": "/ping",
        },
    ],
}


def test_body_entity_keeps_declared_type_and_headers():
    cls, source = load_client(ORDERS)
    transport = RecordingTransport(payload={"id": "o-1", "total": 3.5})
    client = cls(transport)
    order = Order(id="o-1", total=3.5)

    created = client.create(order, "t-1", "acme")

    entity = transport.last.entity
    assert isinstance(entity, HttpEntity)
    assert entity.body is order
    assert entity.headers.items() == [("X-Trace", "t-1"), ("tenant", "acme")]
    assert created == order
    assert "http_entity: HttpEntity[Order] = HttpEntity(order, headers)" in source


def test_generic_body_type_is_preserved_in_entity_annotation():
    _, source = load_client(ORDERS)
    assert "http_entity: HttpEntity[list[Order]] = HttpEntity(orders, headers)" in source


def test_headers_are_not_null_guarded():
    cls, source = load_client(ORDERS)
    transport = RecordingTransport(payload={"id": "o-1"})

    cls(transport).create(Order(id="o-1"), None, None)

    assert transport.last.entity.headers.items() == [("X-Trace", None), ("tenant", None)]
    assert "if trace is not None" not in source
    assert "headers.add('X-Trace', trace)" in source


def test_method_without_body_sends_null_payload():
    cls, source = load_client(ORDERS)
    transport = RecordingTransport()

    cls(transport).ping()

    entity = transport.last.entity
    assert entity.body is None
    assert len(entity.headers) == 0
    assert transport.last.method == "HEAD"
    assert "http_entity: HttpEntity[None] = HttpEntity(None, headers)" in source


def test_verb_is_normalized_to_upper_case():
    cls, source = load_client(ORDERS)
    transport = RecordingTransport()

    cls(transport).bulk([])

    assert transport.last.method == "PUT"
    assert "HttpMethod.PUT" in source
