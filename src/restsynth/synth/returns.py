from __future__ import annotations

import ast
import logging
from dataclasses import dataclass

from restsynth.domain.models import MethodDescriptor, TypeRef
from restsynth.synth.ast_utils import (
    _ann_assign,
    _attr,
    _call,
    _expr_stmt,
    _method_call,
    _name,
    _return,
    _self_attr,
    _subscript,
)
from restsynth.synth.naming import constant_name
from restsynth.synth.types import type_expr, type_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeToken:
    name: str       # class attribute name, also the de-dupe key
    type: TypeRef
    source: str     # rendered type, e.g. list[Order]

    def field(self) -> ast.AnnAssign:
        # ORDER: TypeRef[Order] = TypeRef(Order)
        return _ann_assign(
            self.name,
            _subscript("TypeRef", [type_expr(self.type)]),
            _call("TypeRef", [type_expr(self.type)]),
        )


def token_name(t: TypeRef) -> str:
    return constant_name(type_source(t))


class TokenRegistry:
    """Reified type tokens of one interface, de-duplicated by derived name.

    First registration wins; later methods deriving the same name reuse it.
    Iteration follows first-registration order.
    """

    def __init__(self) -> None:
        self._tokens: dict[str, TypeToken] = {}

    def register(self, t: TypeRef) -> TypeToken:
        name = token_name(t)
        existing = self._tokens.get(name)
        if existing is not None:
            if existing.type != t:
                logger.warning(
                    "type %s shares token %s with %s; first registration wins",
                    type_source(t),
                    name,
                    existing.source,
                )
            return existing
        token = TypeToken(name=name, type=t, source=type_source(t))
        self._tokens[name] = token
        return token

    def __iter__(self):
        return iter(self._tokens.values())

    def __len__(self) -> int:
        return len(self._tokens)


def dispatch_statement(
    method: MethodDescriptor,
    token: TypeToken,
    transport_field: str,
) -> ast.stmt:
    """
    ``self.<transport>.exchange(uri, HttpMethod.<VERB>, http_entity, self.<TOKEN>).body``

    Returned for typed methods; for void methods the body is still read and
    the value discarded.
    """
    exchange = _method_call(
        _self_attr(transport_field),
        "exchange",
        _name("uri"),
        _attr("HttpMethod", method.verb.upper()),
        _name("http_entity"),
        _self_attr(token.name),
    )
    body = _attr(exchange, "body")
    if method.is_void:
        return _expr_stmt(body)
    return _return(body)
