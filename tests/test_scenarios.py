from conftest import RecordingTransport, load_client
from restsynth.domain.loader import parse_descriptors
from restsynth.synth.shell import synthesize_interface
from sample_api import Order

ORDERS = {
    "name": "Orders",
    "module": "sample_api",
    "client_name": "orders-svc",
    "base_path": "/orders",
    "methods": [
        {
            "name": "get_order",
            "verb": "GET",
            "path": "/{orderId}",
            "returns": {"name": "Order", "module": "sample_api"},
            "parameters": [
                {"name": "order_id", "role": "path", "path_name": "orderId", "type": {"name": "str"}},
            ],
        },
        {
            "name": "notify",
            "verb": "POST",
            "path": "/notify",
            "parameters": [
                {
                    "name": "filters",
                    "role": "query",
                    "type": {"name": "dict", "args": [{"name": "str"}, {"name": "str"}]},
                },
            ],
        },
    ],
}


def test_orders_get_by_named_path_variable():
    client = synthesize_interface(parse_descriptors(ORDERS)[0])
    source = client.render()

    assert client.base_url == "http://orders-svc/orders"
    assert "builder = UriBuilder.from_uri_string(self.base_url + '/{orderId}')" in source
    assert "uri_variables = {'orderId': order_id}" in source
    assert "http_entity: HttpEntity[None] = HttpEntity(None, headers)" in source
    assert "return self.transport.exchange(uri, HttpMethod.GET, http_entity, self.ORDER).body" in source
    assert "ORDER: TypeRef[Order] = TypeRef(Order)" in source


def test_orders_get_round_trip_through_transport():
    cls, _ = load_client(ORDERS)
    transport = RecordingTransport(payload={"id": "42", "total": 9.5})

    order = cls(transport).get_order("42")

    assert order == Order(id="42", total=9.5)
    call = transport.last
    assert call.uri == "http://orders-svc/orders/42"
    assert call.method == "GET"
    assert call.entity.body is None
    assert len(call.entity.headers) == 0


def test_void_map_query_scenario():
    cls, source = load_client(ORDERS)
    transport = RecordingTransport(payload={"status": "queued"})
    client = cls(transport)

    assert client.notify({"channel": "email", "lang": "en"}) is None
    assert transport.last.uri == "http://orders-svc/orders/notify?channel=email&lang=en"
    assert transport.last.response_type.is_void

    client.notify(None)
    assert transport.last.uri == "http://orders-svc/orders/notify"

    assert "if filters is not None:" in source
    assert "self.transport.exchange(uri, HttpMethod.POST, http_entity, self.NONE).body" in source


def test_synthesis_is_idempotent():
    descriptor = parse_descriptors(ORDERS)[0]

    first = synthesize_interface(descriptor)
    second = synthesize_interface(descriptor)

    assert first.render() == second.render()
    assert [t.name for t in first.tokens] == [t.name for t in second.tokens]
    assert first.imports == second.imports


def test_rendering_twice_gives_identical_text():
    client = synthesize_interface(parse_descriptors(ORDERS)[0])
    assert client.render() == client.render()
