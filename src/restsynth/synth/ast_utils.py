"""Small constructors for stdlib ``ast`` nodes.

Every statement the synthesizer emits is built here as data and rendered
once by :func:`render_module`. Guard clauses and statement order therefore
live in the builders, not in string templates.
"""

from __future__ import annotations

import ast
from typing import Optional, Sequence, Union

ExprLike = Union[ast.expr, str]


def _name(id: str) -> ast.Name:
    return ast.Name(id=id, ctx=ast.Load())


def _store(id: str) -> ast.Name:
    return ast.Name(id=id, ctx=ast.Store())


def _expr(value: ExprLike) -> ast.expr:
    return _name(value) if isinstance(value, str) else value


def _const(value: object) -> ast.Constant:
    return ast.Constant(value=value)


def _attr(value: ExprLike, attr: str) -> ast.Attribute:
    return ast.Attribute(value=_expr(value), attr=attr, ctx=ast.Load())


def _self_attr(attr: str) -> ast.Attribute:
    return _attr("self", attr)


def _call(
    func: ExprLike,
    args: Optional[Sequence[ast.expr]] = None,
    keywords: Optional[dict[str, ast.expr]] = None,
) -> ast.Call:
    return ast.Call(
        func=_expr(func),
        args=list(args or []),
        keywords=[ast.keyword(arg=k, value=v) for k, v in (keywords or {}).items()],
    )


def _method_call(target: ExprLike, method: str, *args: ast.expr) -> ast.Call:
    return _call(_attr(target, method), list(args))


def _starred(value: ExprLike) -> ast.Starred:
    return ast.Starred(value=_expr(value), ctx=ast.Load())


def _subscript(value: ExprLike, items: Sequence[ast.expr]) -> ast.Subscript:
    if len(items) == 1:
        index: ast.expr = items[0]
    else:
        index = ast.Tuple(elts=list(items), ctx=ast.Load())
    return ast.Subscript(value=_expr(value), slice=index, ctx=ast.Load())


def _is_not_none(value: ast.expr) -> ast.Compare:
    return ast.Compare(left=value, ops=[ast.IsNot()], comparators=[_const(None)])


def _if(test: ast.expr, body: list[ast.stmt]) -> ast.If:
    return ast.If(test=test, body=body, orelse=[])


def _for(target: ast.expr, iter: ast.expr, body: list[ast.stmt]) -> ast.For:
    return ast.For(target=target, iter=iter, body=body, orelse=[])


def _tuple_store(*names: str) -> ast.Tuple:
    return ast.Tuple(elts=[_store(n) for n in names], ctx=ast.Store())


def _assign(target: str, value: ast.expr) -> ast.Assign:
    return ast.Assign(targets=[_store(target)], value=value)


def _ann_assign(target: str, annotation: ast.expr, value: Optional[ast.expr] = None) -> ast.AnnAssign:
    return ast.AnnAssign(target=_store(target), annotation=annotation, value=value, simple=1)


def _attr_assign(owner: str, attr: str, value: ast.expr) -> ast.Assign:
    return ast.Assign(
        targets=[ast.Attribute(value=_name(owner), attr=attr, ctx=ast.Store())],
        value=value,
    )


def _expr_stmt(value: ast.expr) -> ast.Expr:
    return ast.Expr(value=value)


def _return(value: ast.expr) -> ast.Return:
    return ast.Return(value=value)


def _dict(items: Sequence[tuple[str, ast.expr]]) -> ast.Dict:
    return ast.Dict(keys=[_const(k) for k, _ in items], values=[v for _, v in items])


def _list(elts: Sequence[ast.expr]) -> ast.List:
    return ast.List(elts=list(elts), ctx=ast.Load())


def _argument(name: str, annotation: Optional[ast.expr] = None) -> ast.arg:
    return ast.arg(arg=name, annotation=annotation)


def _arguments(args: Sequence[ast.arg]) -> ast.arguments:
    return ast.arguments(
        posonlyargs=[],
        args=list(args),
        vararg=None,
        kwonlyargs=[],
        kw_defaults=[],
        kwarg=None,
        defaults=[],
    )


def _with_type_params(node_cls: type, fields: dict) -> dict:
    # 3.12+ grew PEP 695 type_params on defs; older interpreters reject the field
    if "type_params" in node_cls._fields:
        fields["type_params"] = []
    return fields


def _function_def(
    name: str,
    args: Sequence[ast.arg],
    body: list[ast.stmt],
    returns: Optional[ast.expr] = None,
    decorators: Optional[list[ast.expr]] = None,
) -> ast.FunctionDef:
    fields = {
        "name": name,
        "args": _arguments(args),
        "body": body or [ast.Pass()],
        "decorator_list": list(decorators or []),
        "returns": returns,
    }
    return ast.FunctionDef(**_with_type_params(ast.FunctionDef, fields))


def _class_def(
    name: str,
    bases: Sequence[ast.expr],
    body: list[ast.stmt],
    decorators: Optional[list[ast.expr]] = None,
) -> ast.ClassDef:
    fields = {
        "name": name,
        "bases": list(bases),
        "keywords": [],
        "body": body or [ast.Pass()],
        "decorator_list": list(decorators or []),
    }
    return ast.ClassDef(**_with_type_params(ast.ClassDef, fields))


def _import_from(module: str, names: Sequence[str]) -> ast.ImportFrom:
    return ast.ImportFrom(
        module=module,
        names=[ast.alias(name=n, asname=None) for n in names],
        level=0,
    )


def parse_expression(source: str) -> ast.expr:
    """Parse a single Python expression; raises SyntaxError on bad input."""
    return ast.parse(source.strip(), mode="eval").body


def render_module(body: list[ast.stmt], docstring: Optional[str] = None) -> str:
    stmts: list[ast.stmt] = []
    if docstring:
        stmts.append(_expr_stmt(_const(docstring)))
    stmts.extend(body)
    module = ast.Module(body=stmts, type_ignores=[])
    return ast.unparse(ast.fix_missing_locations(module)) + "\n"


def render(node: ast.AST) -> str:
    """Render a single node (used for diagnostics and naming)."""
    return ast.unparse(ast.fix_missing_locations(node))
