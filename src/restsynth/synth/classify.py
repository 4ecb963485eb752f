from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional

from restsynth.domain.models import MethodDescriptor, ParameterDescriptor
from restsynth.synth.errors import MalformedMetadataError
from restsynth.synth.naming import is_identifier
from restsynth.synth.types import type_traits

logger = logging.getLogger(__name__)

Role = Literal["query", "path", "header", "body", "passthrough"]
Shape = Literal["map", "array", "collection", "scalar", "bean"]

# Locals every generated method body defines; parameters may not shadow them.
RESERVED_LOCALS = frozenset(
    {"self", "builder", "uri_variables", "index_uri_variables", "headers", "http_entity", "uri", "k", "v", "e"}
)

# Runtime names generated method bodies reference as module globals.
RUNTIME_GLOBALS = frozenset({"HttpEntity", "HttpHeaders", "HttpMethod", "TypeRef", "UriBuilder"})


@dataclass(frozen=True)
class QueryProperty:
    key: str       # query key (property name)
    reader: str    # expression read from the parameter


@dataclass(frozen=True)
class ClassifiedParameter:
    """One parameter after classification.

    ``shape`` is only set for query parameters; ``properties`` only for
    bean and scalar shapes.
    """

    param: ParameterDescriptor
    role: Role
    shape: Optional[Shape] = None
    query_key: Optional[str] = None
    properties: tuple[QueryProperty, ...] = ()

    @property
    def name(self) -> str:
        return self.param.name


@dataclass(frozen=True)
class PathVariable:
    param: ParameterDescriptor
    name: Optional[str] = None    # named mode
    index: Optional[int] = None   # positional mode


@dataclass(frozen=True)
class HeaderParam:
    header: str
    param: ParameterDescriptor


@dataclass(frozen=True)
class MethodParams:
    """Parameters of one method grouped by role, declaration order kept."""

    classified: tuple[ClassifiedParameter, ...]
    query: tuple[ClassifiedParameter, ...]
    named_vars: tuple[PathVariable, ...]
    positional_vars: tuple[PathVariable, ...]
    headers: tuple[HeaderParam, ...]
    body: Optional[ParameterDescriptor]


def query_shape(param: ParameterDescriptor) -> Shape:
    """
    Fixed precedence: map, array, collection/iterable, scalar, else bean.

    Anything unrecognized falls back to bean-property expansion; that is a
    policy, not an error.
    """
    traits = type_traits(param.type)
    if "map" in traits:
        return "map"
    if "array" in traits:
        return "array"
    if "collection" in traits or "iterable" in traits:
        return "collection"
    if "scalar" in traits:
        return "scalar"
    return "bean"


def _bean_properties(param: ParameterDescriptor) -> tuple[QueryProperty, ...]:
    props = []
    for p in param.properties:
        reader = (p.reader or "").strip()
        if not reader:
            if not is_identifier(p.name):
                raise MalformedMetadataError(
                    f"property {p.name!r} is not an attribute name; declare an explicit reader",
                    parameter_name=param.name,
                )
            reader = f"{param.name}.{p.name}"
        props.append(QueryProperty(key=p.name, reader=reader))
    return tuple(props)


def classify_parameter(param: ParameterDescriptor) -> ClassifiedParameter:
    """Assign ``param`` its role and, for query parameters, its shape."""
    if not is_identifier(param.name):
        raise MalformedMetadataError("parameter name is not a valid identifier", parameter_name=param.name)
    if param.name in RESERVED_LOCALS:
        raise MalformedMetadataError(
            "parameter name collides with a generated local variable", parameter_name=param.name
        )
    if param.name in RUNTIME_GLOBALS:
        raise MalformedMetadataError(
            "parameter name shadows a runtime name used by the generated body", parameter_name=param.name
        )

    if param.role is None:
        return ClassifiedParameter(param=param, role="passthrough")
    if param.role != "query":
        return ClassifiedParameter(param=param, role=param.role)

    shape = query_shape(param)
    key = (param.query_name or "").strip() or param.name

    if shape == "scalar":
        props: tuple[QueryProperty, ...] = (QueryProperty(key=key, reader=param.name),)
    elif shape == "bean":
        props = _bean_properties(param)
        if not props:
            logger.warning(
                "query parameter %r of type %s has no properties; it contributes nothing to the URI",
                param.name,
                param.type.name,
            )
        else:
            logger.debug("query parameter %r expanded as bean (%d properties)", param.name, len(props))
    else:
        props = ()

    return ClassifiedParameter(param=param, role="query", shape=shape, query_key=key, properties=props)


def _resolve_positions(candidates: list[ParameterDescriptor]) -> tuple[PathVariable, ...]:
    # implicit positions follow declaration order among positional variables
    resolved: dict[int, PathVariable] = {}
    for implicit, p in enumerate(candidates):
        index = p.index if p.index is not None else implicit
        if index < 0 or index >= len(candidates):
            raise MalformedMetadataError(
                f"path variable has neither a name nor a resolvable position (index {index})",
                parameter_name=p.name,
            )
        if index in resolved:
            raise MalformedMetadataError(
                f"path variable position {index} is already taken by {resolved[index].param.name!r}",
                parameter_name=p.name,
            )
        resolved[index] = PathVariable(param=p, index=index)
    return tuple(resolved[i] for i in sorted(resolved))


def classify_method(method: MethodDescriptor) -> MethodParams:
    """Classify every parameter of ``method``; errors carry the method name."""
    try:
        seen: set[str] = set()
        for p in method.parameters:
            if p.name in seen:
                raise MalformedMetadataError("duplicate parameter name", parameter_name=p.name)
            seen.add(p.name)

        classified = tuple(classify_parameter(p) for p in method.parameters)

        query = tuple(c for c in classified if c.role == "query")

        named: list[PathVariable] = []
        positional: list[ParameterDescriptor] = []
        for c in classified:
            if c.role != "path":
                continue
            name = (c.param.path_name or "").strip()
            if name:
                named.append(PathVariable(param=c.param, name=name))
            else:
                positional.append(c.param)

        headers = tuple(
            HeaderParam(header=(c.param.header_name or "").strip() or c.name, param=c.param)
            for c in classified
            if c.role == "header"
        )

        bodies = [c.param for c in classified if c.role == "body"]
        if len(bodies) > 1:
            raise MalformedMetadataError(
                "more than one body parameter declared", parameter_name=bodies[1].name
            )

        return MethodParams(
            classified=classified,
            query=query,
            named_vars=tuple(named),
            positional_vars=_resolve_positions(positional),
            headers=headers,
            body=bodies[0] if bodies else None,
        )
    except MalformedMetadataError as exc:
        raise MalformedMetadataError(
            exc.reason, method_name=method.name, parameter_name=exc.parameter_name
        ) from exc
