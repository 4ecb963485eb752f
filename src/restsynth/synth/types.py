from __future__ import annotations

import ast
from typing import Iterable, Optional

from restsynth.domain.models import TypeRef
from restsynth.synth.ast_utils import _const, _name, _subscript, render

# Names that resolve without an import in the generated module.
_BUILTINS = {
    "None", "object", "str", "int", "float", "bool", "bytes", "bytearray",
    "complex", "list", "dict", "set", "frozenset", "tuple", "type",
}

# Well-known names and the module the generated code imports them from,
# used when a descriptor omits TypeRef.module.
_WELL_KNOWN_MODULES = {
    "Any": "typing",
    "Optional": "typing",
    "Union": "typing",
    "Literal": "typing",
    "Dict": "typing",
    "List": "typing",
    "Set": "typing",
    "FrozenSet": "typing",
    "Tuple": "typing",
    "Mapping": "collections.abc",
    "MutableMapping": "collections.abc",
    "Sequence": "collections.abc",
    "MutableSequence": "collections.abc",
    "Collection": "collections.abc",
    "Iterable": "collections.abc",
    "Iterator": "collections.abc",
    "Generator": "collections.abc",
    "AbstractSet": "typing",
    "MutableSet": "collections.abc",
    "OrderedDict": "collections",
    "defaultdict": "collections",
    "deque": "collections",
    "Counter": "collections",
    "ChainMap": "collections",
    "Decimal": "decimal",
    "UUID": "uuid",
    "date": "datetime",
    "datetime": "datetime",
    "time": "datetime",
    "timedelta": "datetime",
}

_MAP_NAMES = {
    "dict", "Dict", "Mapping", "MutableMapping", "OrderedDict",
    "defaultdict", "Counter", "ChainMap",
}
_ARRAY_NAMES = {"tuple", "Tuple", "array"}
_COLLECTION_NAMES = {
    "list", "List", "set", "Set", "frozenset", "FrozenSet", "deque",
    "Sequence", "MutableSequence", "Collection", "AbstractSet", "MutableSet",
}
_ITERABLE_NAMES = {"Iterable", "Iterator", "Generator"}
_SCALAR_NAMES = {
    "str", "int", "float", "bool", "bytes", "complex", "Any", "object",
    "Decimal", "UUID", "date", "datetime", "time", "timedelta", "Literal",
}


def unwrap_optional(t: TypeRef) -> TypeRef:
    # Optional[X] and Union[X, None] classify as X
    if t.name == "Optional" and len(t.args) == 1:
        return unwrap_optional(t.args[0])
    if t.name == "Union":
        rest = [a for a in t.args if not a.is_none]
        if len(rest) == 1:
            return unwrap_optional(rest[0])
    return t


def type_traits(t: TypeRef) -> set[str]:
    """Traits of ``t``: declared ones win, otherwise inferred from the name."""
    t = unwrap_optional(t)
    if t.traits is not None:
        return set(t.traits)

    traits: set[str] = set()
    if t.name in _MAP_NAMES:
        traits |= {"map", "collection", "iterable"}
    if t.name in _ARRAY_NAMES:
        traits |= {"array", "iterable"}
    if t.name in _COLLECTION_NAMES:
        traits |= {"collection", "iterable"}
    if t.name in _ITERABLE_NAMES:
        traits.add("iterable")
    if t.name in _SCALAR_NAMES:
        traits.add("scalar")
    return traits


def type_expr(t: TypeRef) -> ast.expr:
    """Build the Python type expression for ``t`` (e.g. ``dict[str, list[Order]]``)."""
    if t.is_none:
        return _const(None)
    base = _name(t.name)
    if not t.args:
        return base
    return _subscript(base, [type_expr(a) for a in t.args])


def type_source(t: TypeRef) -> str:
    return render(type_expr(t))


def _import_module(t: TypeRef) -> Optional[str]:
    if t.module:
        return t.module
    if t.name in _BUILTINS:
        return None
    return _WELL_KNOWN_MODULES.get(t.name)


def collect_imports(types: Iterable[TypeRef], into: dict[str, set[str]]) -> dict[str, set[str]]:
    """Record ``module -> names`` needed to evaluate ``types`` in the generated module."""
    for t in types:
        module = _import_module(t)
        if module:
            into.setdefault(module, set()).add(t.name)
        collect_imports(t.args, into)
    return into


def unresolved_names(t: TypeRef) -> list[str]:
    """Names in ``t`` the generated module could neither import nor resolve as builtins."""
    missing = [] if t.is_none or _import_module(t) or t.name in _BUILTINS else [t.name]
    for a in t.args:
        missing.extend(n for n in unresolved_names(a) if n not in missing)
    return missing
