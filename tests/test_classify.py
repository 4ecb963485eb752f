import pytest

from restsynth.domain.models import MethodDescriptor, ParameterDescriptor
from restsynth.synth.classify import classify_method, classify_parameter
from restsynth.synth.errors import MalformedMetadataError


def _param(**kw) -> ParameterDescriptor:
    return ParameterDescriptor.model_validate(kw)


def _method(*params: dict, name: str = "call") -> MethodDescriptor:
    return MethodDescriptor.model_validate({"name": name, "verb": "GET", "path": "/x", "parameters": list(params)})


@pytest.mark.parametrize(
    "type_,shape",
    [
        ({"name": "dict", "args": [{"name": "str"}, {"name": "str"}]}, "map"),
        ({"name": "Mapping", "args": [{"name": "str"}, {"name": "int"}]}, "map"),
        ({"name": "tuple", "args": [{"name": "int"}]}, "array"),
        ({"name": "list", "args": [{"name": "str"}]}, "collection"),
        ({"name": "set", "args": [{"name": "str"}]}, "collection"),
        ({"name": "Iterable", "args": [{"name": "str"}]}, "collection"),
        ({"name": "Optional", "args": [{"name": "list", "args": [{"name": "int"}]}]}, "collection"),
        ({"name": "str"}, "scalar"),
        ({"name": "int"}, "scalar"),
        ({"name": "Criteria"}, "bean"),
    ],
)
def test_query_shape_precedence(type_, shape):
    c = classify_parameter(_param(name="p", type=type_, role="query"))
    assert c.role == "query"
    assert c.shape == shape


def test_map_wins_over_iterable_when_both_traits_declared():
    c = classify_parameter(
        _param(name="p", type={"name": "MultiDict", "traits": ["iterable", "collection", "map"]}, role="query")
    )
    assert c.shape == "map"


def test_declared_traits_override_name_inference():
    c = classify_parameter(_param(name="p", type={"name": "list", "traits": ["scalar"]}, role="query"))
    assert c.shape == "scalar"


def test_scalar_expands_as_single_property_keyed_by_query_name():
    c = classify_parameter(_param(name="q", type={"name": "str"}, role="query", query_name="search"))
    assert c.query_key == "search"
    assert [(p.key, p.reader) for p in c.properties] == [("search", "q")]


def test_bean_properties_keep_declaration_order_and_default_readers():
    c = classify_parameter(
        _param(
            name="criteria",
            type={"name": "Criteria"},
            role="query",
            properties=[{"name": "page"}, {"name": "size", "reader": "criteria.page_size"}],
        )
    )
    assert c.shape == "bean"
    assert [(p.key, p.reader) for p in c.properties] == [
        ("page", "criteria.page"),
        ("size", "criteria.page_size"),
    ]


def test_non_query_roles_have_no_shape():
    for role in ("path", "header", "body"):
        c = classify_parameter(_param(name="p", type={"name": "dict"}, role=role))
        assert c.role == role
        assert c.shape is None


def test_parameter_without_role_is_passthrough():
    c = classify_parameter(_param(name="p"))
    assert c.role == "passthrough"


def test_classify_method_partitions_in_declaration_order():
    params = classify_method(
        _method(
            {"name": "b", "role": "query", "type": {"name": "str"}},
            {"name": "a", "role": "query", "type": {"name": "str"}},
            {"name": "order_id", "role": "path", "path_name": "orderId"},
            {"name": "part", "role": "path"},
            {"name": "trace", "role": "header", "header_name": "X-Trace"},
            {"name": "payload", "role": "body"},
            {"name": "extra"},
        )
    )
    assert [q.name for q in params.query] == ["b", "a"]
    assert [(v.name, v.param.name) for v in params.named_vars] == [("orderId", "order_id")]
    assert [(v.index, v.param.name) for v in params.positional_vars] == [(0, "part")]
    assert [(h.header, h.param.name) for h in params.headers] == [("X-Trace", "trace")]
    assert params.body.name == "payload"
    assert len(params.classified) == 7


def test_positional_variables_sorted_by_explicit_index():
    params = classify_method(
        _method(
            {"name": "first", "role": "path", "index": 1},
            {"name": "second", "role": "path", "index": 0},
        )
    )
    assert [v.param.name for v in params.positional_vars] == ["second", "first"]


def test_blank_path_name_falls_back_to_positional():
    params = classify_method(_method({"name": "part", "role": "path", "path_name": "  "}))
    assert params.named_vars == ()
    assert [v.index for v in params.positional_vars] == [0]


def test_unresolvable_position_names_method_and_parameter():
    with pytest.raises(MalformedMetadataError) as info:
        classify_method(_method({"name": "part", "role": "path", "index": 3}, name="fetch"))
    err = info.value
    assert err.method_name == "fetch"
    assert err.parameter_name == "part"
    assert "fetch(part)" in err.message


def test_duplicate_position_is_rejected():
    with pytest.raises(MalformedMetadataError) as info:
        classify_method(
            _method(
                {"name": "a", "role": "path", "index": 0},
                {"name": "b", "role": "path", "index": 0},
            )
        )
    assert info.value.parameter_name == "b"


def test_second_body_parameter_is_rejected():
    with pytest.raises(MalformedMetadataError) as info:
        classify_method(_method({"name": "a", "role": "body"}, {"name": "b", "role": "body"}))
    assert info.value.parameter_name == "b"


@pytest.mark.parametrize("name", ["headers", "builder", "uri", "k", "class", "not-valid"])
def test_parameter_names_that_cannot_be_emitted_are_rejected(name):
    with pytest.raises(MalformedMetadataError):
        classify_method(_method({"name": name, "role": "query"}))


def test_duplicate_parameter_names_are_rejected():
    with pytest.raises(MalformedMetadataError):
        classify_method(_method({"name": "a"}, {"name": "a", "role": "query"}))


@pytest.mark.parametrize("name", ["UriBuilder", "HttpHeaders", "HttpEntity", "HttpMethod", "TypeRef"])
def test_parameter_names_shadowing_runtime_names_are_rejected(name):
    with pytest.raises(MalformedMetadataError, match="shadows a runtime name") as info:
        classify_method(_method({"name": name}))
    assert info.value.parameter_name == name


def test_bean_property_without_reader_must_be_an_attribute_name():
    raw = {
        "name": "criteria",
        "type": {"name": "Criteria"},
        "role": "query",
        "properties": [{"name": "page-size"}],
    }
    with pytest.raises(MalformedMetadataError, match="explicit reader") as info:
        classify_method(_method(raw, name="search"))
    assert (info.value.method_name, info.value.parameter_name) == ("search", "criteria")


def test_bean_property_with_explicit_reader_may_use_any_key():
    c = classify_parameter(
        _param(
            name="criteria",
            type={"name": "Criteria"},
            role="query",
            properties=[{"name": "page-size", "reader": "criteria.page_size"}],
        )
    )
    assert [(p.key, p.reader) for p in c.properties] == [("page-size", "criteria.page_size")]
