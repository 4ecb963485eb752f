from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from restsynth.domain.models import InterfaceDescriptor
from restsynth.synth.errors import DescriptorError

_INTERFACES = TypeAdapter(list[InterfaceDescriptor])


def parse_descriptors(payload: Any, source: str = "<memory>") -> list[InterfaceDescriptor]:
    """
    Accepts a single interface object, a list of them, or
    ``{"interfaces": [...]}``.
    """
    if isinstance(payload, dict) and "interfaces" in payload:
        payload = payload["interfaces"]
    elif isinstance(payload, dict):
        payload = [payload]

    try:
        return _INTERFACES.validate_python(payload)
    except ValidationError as exc:
        raise DescriptorError(f"invalid descriptor ({exc.error_count()} errors)\n{exc}", source) from exc


def load_descriptors(path: Path) -> list[InterfaceDescriptor]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise DescriptorError(f"cannot read descriptor: {exc}", str(path)) from exc
    except json.JSONDecodeError as exc:
        raise DescriptorError(f"not valid JSON: {exc}", str(path)) from exc
    return parse_descriptors(payload, source=str(path))
