from __future__ import annotations

import keyword
import re
from typing import Optional


_MULTI_SLASH = re.compile(r"/{2,}")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SAFE = re.compile(r"[^a-zA-Z0-9_]+")


def normalize_base_path(path: Optional[str]) -> str:
    """
    Normalize a type-level route template into the suffix of the base URL.

    - blank -> "" (the base URL is just scheme + client name)
    - leading slash added; the template itself is kept verbatim
    - collapsed double slashes, no trailing slash
    """
    p = (path or "").strip()
    if not p:
        return ""
    if not p.startswith("/"):
        p = "/" + p

    p = _MULTI_SLASH.sub("/", p)
    return p.rstrip("/")


def lower_first(name: str) -> str:
    # OrdersConnector -> ordersConnector
    return name[:1].lower() + name[1:]


def snake_case(name: str) -> str:
    # OrderLine -> order_line, list[Order] -> list_order
    words = _SAFE.sub("_", _CAMEL_BOUNDARY.sub("_", name))
    return re.sub(r"_+", "_", words).strip("_").lower()


def constant_name(text: str) -> str:
    """Derive an UPPER_SNAKE identifier from arbitrary text (e.g. a type expression)."""
    base = snake_case(text).upper()
    if not base:
        return "TYPE"
    if base[0].isdigit():
        base = f"T_{base}"
    return base


def is_identifier(name: str) -> bool:
    return bool(name) and name.isidentifier() and not keyword.iskeyword(name)
