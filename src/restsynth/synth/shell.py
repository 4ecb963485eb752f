from __future__ import annotations

import ast
import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Iterable, Optional

from restsynth.domain.models import InterfaceDescriptor, MethodDescriptor, SynthesisOptions
from restsynth.synth.ast_utils import (
    _argument,
    _ann_assign,
    _attr_assign,
    _call,
    _class_def,
    _const,
    _expr_stmt,
    _function_def,
    _import_from,
    _name,
    render_module,
)
from restsynth.synth.classify import RUNTIME_GLOBALS
from restsynth.synth.errors import InvalidClientNameError, MalformedMetadataError, SynthesisError
from restsynth.synth.method import synthesize_method
from restsynth.synth.naming import is_identifier, lower_first, normalize_base_path
from restsynth.synth.returns import TokenRegistry, TypeToken
from restsynth.synth.types import collect_imports

logger = logging.getLogger(__name__)

_SHELL_RUNTIME_NAMES = ("ConfigValue", "Transport", "circuit_breaker", "require_not_none", "service")
_METHOD_RUNTIME_NAMES = tuple(sorted(RUNTIME_GLOBALS))


@dataclass(frozen=True)
class SynthesizedClient:
    interface_name: str
    class_name: str
    registered_name: str
    client_name: str
    base_url: str
    class_def: ast.ClassDef
    imports: dict[str, frozenset[str]]
    tokens: tuple[TypeToken, ...]

    def render(self) -> str:
        return render_clients([self])


class ClientShell:
    """
    Per-interface synthesis state: the enclosing class, its collected
    methods and its token registry.

    One shell per interface; tokens never leak between interfaces.
    """

    def __init__(self, descriptor: InterfaceDescriptor, options: Optional[SynthesisOptions] = None):
        self.descriptor = descriptor
        self.options = options or SynthesisOptions()

        client_name = (descriptor.client_name or "").strip()
        if not client_name:
            raise InvalidClientNameError("client name must not be blank", interface_name=descriptor.name)
        if not is_identifier(descriptor.name):
            raise MalformedMetadataError("interface name is not a valid identifier", interface_name=descriptor.name)
        if not (descriptor.module or "").strip():
            raise MalformedMetadataError(
                "interface has no module to import it from", interface_name=descriptor.name
            )
        if not is_identifier(self.options.transport_field):
            raise MalformedMetadataError(
                f"transport field {self.options.transport_field!r} is not a valid identifier",
                interface_name=descriptor.name,
            )

        self.client_name = client_name
        self.class_name = descriptor.name + self.options.class_suffix
        self.registered_name = lower_first(self.class_name)
        self.tokens = TokenRegistry()
        self._methods: list[ast.FunctionDef] = []

    @cached_property
    def base_url(self) -> str:
        # computed once per interface, shared by every method
        return f"{self.options.scheme}://{self.client_name}{normalize_base_path(self.descriptor.base_path)}"

    def add_method(self, method: MethodDescriptor) -> None:
        try:
            if method.name in {self.options.transport_field, "base_url", "__init__"}:
                raise MalformedMetadataError("method name collides with a client member", method_name=method.name)
            if any(fn.name == method.name for fn in self._methods):
                raise MalformedMetadataError("duplicate method name", method_name=method.name)
            fn = synthesize_method(method, self.tokens, self.options)
        except SynthesisError as exc:
            raise exc.with_interface(self.descriptor.name) from exc
        self._methods.append(fn)

    def _constructor(self) -> ast.FunctionDef:
        field = self.options.transport_field
        return _function_def(
            "__init__",
            [_argument("self"), _argument(field, _name("Transport"))],
            [
                _expr_stmt(_call("require_not_none", [_name(field), _const(f"{field} must not be None")])),
                _attr_assign("self", field, _name(field)),
            ],
            returns=_const(None),
        )

    def _imports(self) -> dict[str, frozenset[str]]:
        needed: dict[str, set[str]] = {}
        runtime = set(_SHELL_RUNTIME_NAMES)
        if self._methods:
            runtime |= set(_METHOD_RUNTIME_NAMES)
        needed[self.options.runtime_module] = runtime

        if self.descriptor.module:
            needed.setdefault(self.descriptor.module, set()).add(self.descriptor.name)

        types = []
        for m in self.descriptor.methods:
            types.append(m.returns)
            types.extend(p.type for p in m.parameters)
        collect_imports(types, needed)
        return {module: frozenset(names) for module, names in needed.items()}

    def _check_token_names(self, tokens: tuple[TypeToken, ...]) -> None:
        # token fields are assigned after the methods and would replace them
        members = {fn.name for fn in self._methods} | {self.options.transport_field}
        for t in tokens:
            if t.name in members:
                raise MalformedMetadataError(
                    f"member name collides with the type token {t.name}",
                    interface_name=self.descriptor.name,
                    method_name=t.name if t.name != self.options.transport_field else None,
                )

    def finalize(self) -> SynthesizedClient:
        """Close the class: shell members, methods, then the token block."""
        tokens = tuple(self.tokens)
        self._check_token_names(tokens)
        config_key = f"{self.client_name}.baseUrl"

        body: list[ast.stmt] = [
            _ann_assign(self.options.transport_field, _name("Transport")),
            _ann_assign(
                "base_url",
                _name("str"),
                _call("ConfigValue", [_const(config_key), _const(self.base_url)]),
            ),
            self._constructor(),
        ]
        body.extend(self._methods)
        body.extend(t.field() for t in tokens)

        class_def = _class_def(
            self.class_name,
            [_name(self.descriptor.name)],
            body,
            decorators=[
                _call("circuit_breaker", keywords={"name": _const(self.client_name)}),
                _call("service", [_const(self.registered_name)]),
            ],
        )
        logger.info(
            "synthesized %s (%d methods, %d type tokens, base url %s)",
            self.class_name,
            len(self._methods),
            len(tokens),
            self.base_url,
        )
        return SynthesizedClient(
            interface_name=self.descriptor.name,
            class_name=self.class_name,
            registered_name=self.registered_name,
            client_name=self.client_name,
            base_url=self.base_url,
            class_def=class_def,
            imports=self._imports(),
            tokens=tokens,
        )


def synthesize_interface(
    descriptor: InterfaceDescriptor,
    options: Optional[SynthesisOptions] = None,
) -> SynthesizedClient:
    """Synthesize one client class; any failure aborts the whole interface."""
    shell = ClientShell(descriptor, options)
    for method in descriptor.methods:
        shell.add_method(method)
    return shell.finalize()


def _import_block(clients: Iterable[SynthesizedClient]) -> list[ast.stmt]:
    merged: dict[str, set[str]] = {}
    for c in clients:
        for module, names in c.imports.items():
            merged.setdefault(module, set()).update(names)

    stmts: list[ast.stmt] = [_import_from("__future__", ["annotations"])]
    for module in sorted(merged):
        stmts.append(_import_from(module, sorted(merged[module])))
    return stmts


def render_clients(clients: list[SynthesizedClient]) -> str:
    """Render one Python module holding ``clients`` in the given order."""
    names = ", ".join(c.interface_name for c in clients)
    body = _import_block(clients)
    body.extend(c.class_def for c in clients)
    return render_module(body, docstring=f"Generated by restsynth from {names}. Do not edit.")
