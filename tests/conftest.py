from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest

from restsynth.domain.loader import parse_descriptors
from restsynth.runtime import HttpEntity, HttpMethod, ResponseEntity, TypeRef, reset_configuration
from restsynth.synth.shell import synthesize_interface


@dataclass
class Exchange:
    uri: str
    method: HttpMethod
    entity: HttpEntity
    response_type: TypeRef


class RecordingTransport:
    """Transport double: records every exchange and decodes a canned payload."""

    def __init__(self, payload: Any = None, status_code: int = 200):
        self.payload = payload
        self.status_code = status_code
        self.calls: list[Exchange] = []

    def exchange(self, uri, method, entity, response_type):
        self.calls.append(Exchange(uri, method, entity, response_type))
        return ResponseEntity(self.status_code, response_type.decode(self.payload))

    @property
    def last(self) -> Exchange:
        return self.calls[-1]


def load_client(raw: dict) -> tuple[type, str]:
    """Synthesize ``raw``, exec the module on its own and return (client class, source)."""
    descriptor = parse_descriptors(raw)[0]
    client = synthesize_interface(descriptor)
    source = client.render()

    ns: dict = {}
    exec(compile(source, f"<{client.class_name}>", "exec"), ns)
    return ns[client.class_name], source


@pytest.fixture(autouse=True)
def _clean_runtime_config():
    reset_configuration()
    yield
    reset_configuration()
