import json

import pytest

from restsynth.domain.loader import load_descriptors, parse_descriptors
from restsynth.synth.errors import DescriptorError

ONE = {"name": "Orders", "client_name": "orders-svc", "methods": [{"name": "ping", "verb": "GET"}]}


def test_parse_accepts_object_list_and_wrapper():
    assert [d.name for d in parse_descriptors(ONE)] == ["Orders"]
    assert [d.name for d in parse_descriptors([ONE, {**ONE, "name": "Users"}])] == ["Orders", "Users"]
    assert [d.name for d in parse_descriptors({"interfaces": [ONE]})] == ["Orders"]


def test_parse_applies_defaults():
    d = parse_descriptors(ONE)[0]
    m = d.methods[0]
    assert d.base_path is None
    assert m.path == ""
    assert m.is_void
    assert m.parameters == []


def test_parse_rejects_invalid_role():
    raw = {**ONE, "methods": [{"name": "x", "verb": "GET", "parameters": [{"name": "a", "role": "cookie"}]}]}
    with pytest.raises(DescriptorError) as info:
        parse_descriptors(raw, source="api.json")
    assert info.value.path == "api.json"


def test_load_descriptors_from_file(tmp_path):
    p = tmp_path / "orders.json"
    p.write_text(json.dumps(ONE), encoding="utf-8")
    assert [d.client_name for d in load_descriptors(p)] == ["orders-svc"]


def test_load_descriptors_reports_bad_json(tmp_path):
    p = tmp_path / "broken.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(DescriptorError, match="not valid JSON"):
        load_descriptors(p)
