from __future__ import annotations

import ast

from restsynth.synth.ast_utils import (
    _ann_assign,
    _assign,
    _call,
    _const,
    _expr_stmt,
    _method_call,
    _name,
    _subscript,
)
from restsynth.synth.classify import MethodParams
from restsynth.synth.types import type_expr


def envelope_statements(params: MethodParams) -> list[ast.stmt]:
    """
    ``headers`` plus the ``http_entity`` wrapper.

    Header appends are deliberately unguarded (query appends are guarded).
    The entity is annotated with the body's full declared type.
    """
    stmts: list[ast.stmt] = [_assign("headers", _call("HttpHeaders"))]
    for h in params.headers:
        stmts.append(_expr_stmt(_method_call("headers", "add", _const(h.header), _name(h.param.name))))

    if params.body is None:
        annotation = _subscript("HttpEntity", [_const(None)])
        payload: ast.expr = _const(None)
    else:
        annotation = _subscript("HttpEntity", [type_expr(params.body.type)])
        payload = _name(params.body.name)

    stmts.append(_ann_assign("http_entity", annotation, _call("HttpEntity", [payload, _name("headers")])))
    return stmts
