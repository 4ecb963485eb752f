from __future__ import annotations

import ast

from restsynth.synth.ast_utils import (
    _assign,
    _const,
    _dict,
    _expr_stmt,
    _for,
    _if,
    _is_not_none,
    _list,
    _method_call,
    _name,
    _self_attr,
    _starred,
    _tuple_store,
    _store,
    parse_expression,
)
from restsynth.synth.classify import ClassifiedParameter, MethodParams
from restsynth.synth.errors import MalformedMetadataError


def _query_param(*args: ast.expr) -> ast.Expr:
    return _expr_stmt(_method_call("builder", "query_param", *args))


def _reader_expr(param: ClassifiedParameter, reader: str) -> ast.expr:
    try:
        return parse_expression(reader)
    except SyntaxError as exc:
        raise MalformedMetadataError(
            f"property reader {reader!r} is not a valid expression", parameter_name=param.name
        ) from exc


def query_statements(param: ClassifiedParameter) -> list[ast.stmt]:
    """
    Append statements for one query parameter.

    Map, array and collection shapes are guarded by a None check on the
    parameter itself. Bean (and scalar) shapes guard each property reader
    individually; a bean parent is never checked.
    """
    value = _name(param.name)
    key = _const(param.query_key)

    if param.shape == "map":
        # for k, v in p.items(): builder.query_param(k, v)
        loop = _for(
            _tuple_store("k", "v"),
            _method_call(param.name, "items"),
            [_query_param(_name("k"), _name("v"))],
        )
        return [_if(_is_not_none(value), [loop])]

    if param.shape == "array":
        # one multi-valued key
        return [_if(_is_not_none(value), [_query_param(key, _starred(param.name))])]

    if param.shape == "collection":
        loop = _for(_store("e"), value, [_query_param(key, _name("e"))])
        return [_if(_is_not_none(value), [loop])]

    stmts: list[ast.stmt] = []
    for prop in param.properties:
        reader = _reader_expr(param, prop.reader)
        stmts.append(_if(_is_not_none(reader), [_query_param(_const(prop.key), reader)]))
    return stmts


def uri_statements(path: str, params: MethodParams) -> list[ast.stmt]:
    """
    Statements that build ``uri`` for one method:

    1. builder seeded with ``self.base_url + path``
    2. query appends in declaration order
    3. named map and/or positional list of path variables
    4. ``uri = builder[.uri_variables(..)].build_and_expand(..).to_uri()``
    """
    seed = ast.BinOp(left=_self_attr("base_url"), op=ast.Add(), right=_const(path))
    stmts: list[ast.stmt] = [
        _assign("builder", _method_call("UriBuilder", "from_uri_string", seed)),
    ]

    for q in params.query:
        stmts.extend(query_statements(q))

    if params.named_vars:
        stmts.append(
            _assign("uri_variables", _dict([(v.name, _name(v.param.name)) for v in params.named_vars]))
        )
    if params.positional_vars:
        # already sorted by resolved index
        stmts.append(
            _assign("index_uri_variables", _list([_name(v.param.name) for v in params.positional_vars]))
        )

    chain: ast.expr = _name("builder")
    if params.named_vars:
        chain = _method_call(chain, "uri_variables", _name("uri_variables"))
    if params.positional_vars:
        chain = _method_call(chain, "build_and_expand", _starred("index_uri_variables"))
    else:
        chain = _method_call(chain, "build_and_expand")
    stmts.append(_assign("uri", _method_call(chain, "to_uri")))
    return stmts

