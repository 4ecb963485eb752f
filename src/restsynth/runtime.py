"""Support layer imported by generated clients.

Generated code builds URIs with :class:`UriBuilder`, wraps headers and body
in an :class:`HttpEntity` and hands both to a :class:`Transport` together with
a :class:`TypeRef` describing the full response type. Transports, retries and
circuit breaking are supplied by the application; this module only carries
the metadata they key on.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Iterator, Mapping, Optional, Protocol, TypeVar
from urllib.parse import quote

from pydantic import TypeAdapter

T = TypeVar("T")
C = TypeVar("C", bound=type)

_PLACEHOLDER = re.compile(r"\{([^{}/?&=]+)\}")


class HttpMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


def _to_text(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _placeholder_name(match: re.Match) -> str:
    # {id:\d+} -> id
    return match.group(1).split(":", 1)[0].strip()


class UriBuilder:
    """Template-based URI builder.

    ``uri_variables`` expands named placeholders it has values for and leaves
    the rest; ``build_and_expand`` then fills the remaining placeholders left
    to right. Query pairs are appended in call order after the template.
    """

    def __init__(self, template: str):
        self._template = template
        self._query: list[tuple[str, Optional[str]]] = []

    @classmethod
    def from_uri_string(cls, template: str) -> UriBuilder:
        return cls(template)

    def query_param(self, name: Any, *values: Any) -> UriBuilder:
        if not values:
            self._query.append((_to_text(name), None))
        for v in values:
            self._query.append((_to_text(name), None if v is None else _to_text(v)))
        return self

    def uri_variables(self, variables: Mapping[str, Any]) -> UriBuilder:
        def sub(m: re.Match) -> str:
            name = _placeholder_name(m)
            if name not in variables:
                return m.group(0)
            return quote(_to_text(variables[name]), safe="")

        self._template = _PLACEHOLDER.sub(sub, self._template)
        return self

    def build_and_expand(self, *values: Any) -> UriComponents:
        remaining = iter(values)

        def sub(m: re.Match) -> str:
            try:
                value = next(remaining)
            except StopIteration:
                raise ValueError(
                    f"not enough variable values to expand {_placeholder_name(m)!r} in {self._template!r}"
                ) from None
            return quote(_to_text(value), safe="")

        expanded = _PLACEHOLDER.sub(sub, self._template)
        return UriComponents(expanded, tuple(self._query))

    def __repr__(self) -> str:
        return f"UriBuilder({self._template!r}, query={self._query!r})"


@dataclass(frozen=True)
class UriComponents:
    base: str
    query: tuple[tuple[str, Optional[str]], ...] = ()

    def to_uri(self) -> str:
        if not self.query:
            return self.base
        parts = []
        for name, value in self.query:
            key = quote(name, safe="")
            parts.append(key if value is None else f"{key}={quote(value, safe='')}")
        sep = "&" if "?" in self.base else "?"
        return f"{self.base}{sep}{'&'.join(parts)}"


class HttpHeaders:
    """Ordered multi-valued headers with case-insensitive lookup."""

    def __init__(self) -> None:
        self._items: list[tuple[str, Any]] = []

    def add(self, name: str, value: Any) -> None:
        self._items.append((name, value))

    def get_all(self, name: str) -> list[Any]:
        key = name.lower()
        return [v for n, v in self._items if n.lower() == key]

    def get(self, name: str, default: Any = None) -> Any:
        values = self.get_all(name)
        return values[0] if values else default

    def items(self) -> list[tuple[str, Any]]:
        return list(self._items)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"HttpHeaders({self._items!r})"


@dataclass
class HttpEntity(Generic[T]):
    body: Optional[T]
    headers: HttpHeaders = field(default_factory=HttpHeaders)


@dataclass
class ResponseEntity(Generic[T]):
    status_code: int
    body: Optional[T] = None
    headers: HttpHeaders = field(default_factory=HttpHeaders)


class TypeRef(Generic[T]):
    """Reified type token: keeps ``list[Order]`` intact at runtime.

    ``decode`` validates raw payloads against the full type through a cached
    pydantic ``TypeAdapter``. The void token (``TypeRef(None)``) decodes to
    ``None``.
    """

    def __init__(self, type_: Any):
        self.type = type_
        self._adapter: Optional[TypeAdapter] = None

    @property
    def is_void(self) -> bool:
        return self.type is None or self.type is type(None)

    def decode(self, data: Any) -> Optional[T]:
        if self.is_void:
            return None
        if self._adapter is None:
            self._adapter = TypeAdapter(self.type)
        return self._adapter.validate_python(data)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, TypeRef) and other.type == self.type

    def __hash__(self) -> int:
        return hash(repr(self.type))

    def __repr__(self) -> str:
        return f"TypeRef({self.type!r})"


class Transport(Protocol):
    def exchange(
        self,
        uri: str,
        method: HttpMethod,
        entity: HttpEntity[Any],
        response_type: TypeRef[T],
    ) -> ResponseEntity[T]: ...


_settings: dict[str, str] = {}


def configure(values: Mapping[str, str]) -> None:
    """Register configuration values (e.g. ``{"orders-svc.baseUrl": "http://localhost:8080"}``)."""
    _settings.update(values)


def reset_configuration() -> None:
    _settings.clear()


def env_key(key: str) -> str:
    # orders-svc.baseUrl -> ORDERS_SVC_BASEURL
    return re.sub(r"[^A-Za-z0-9]+", "_", key).strip("_").upper()


def lookup(key: str, default: Optional[str] = None) -> Optional[str]:
    if key in _settings:
        return _settings[key]
    return os.environ.get(env_key(key), default)


class ConfigValue:
    """Class attribute resolved from configuration on every access.

    Lookup order: :func:`configure` values, the environment, the default.
    Assigning on an instance overrides it for that instance.
    """

    def __init__(self, key: str, default: Optional[str] = None):
        self.key = key
        self.default = default
        self._attr = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self._attr = name

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is not None and self._attr in instance.__dict__:
            return instance.__dict__[self._attr]
        return lookup(self.key, self.default)

    def __set__(self, instance: Any, value: Any) -> None:
        instance.__dict__[self._attr] = value


def circuit_breaker(name: str) -> Callable[[C], C]:
    """Mark a client class with the circuit breaker it should be wrapped in."""

    def decorator(cls: C) -> C:
        cls.__circuit_breaker__ = name  # type: ignore[attr-defined]
        return cls

    return decorator


def service(name: str) -> Callable[[C], C]:
    """Mark a client class for container registration under ``name``."""

    def decorator(cls: C) -> C:
        cls.__service_name__ = name  # type: ignore[attr-defined]
        return cls

    return decorator


def require_not_none(value: Any, message: str) -> None:
    if value is None:
        raise ValueError(message)
