from __future__ import annotations

import ast
import logging

from restsynth.domain.models import HTTP_VERBS, MethodDescriptor, SynthesisOptions
from restsynth.synth.ast_utils import _argument, _function_def
from restsynth.synth.classify import classify_method
from restsynth.synth.envelope import envelope_statements
from restsynth.synth.errors import MalformedMetadataError
from restsynth.synth.naming import is_identifier
from restsynth.synth.returns import TokenRegistry, dispatch_statement
from restsynth.synth.types import type_expr, unresolved_names
from restsynth.synth.uri import uri_statements

logger = logging.getLogger(__name__)


def _check_importable(method: MethodDescriptor) -> None:
    # every referenced type needs a module unless it is a builtin or well-known name
    missing = unresolved_names(method.returns)
    if missing:
        raise MalformedMetadataError(
            f"return type {missing[0]!r} has no module to import it from", method_name=method.name
        )
    for p in method.parameters:
        missing = unresolved_names(p.type)
        if missing:
            raise MalformedMetadataError(
                f"type {missing[0]!r} has no module to import it from",
                method_name=method.name,
                parameter_name=p.name,
            )


def synthesize_method(
    method: MethodDescriptor,
    tokens: TokenRegistry,
    options: SynthesisOptions,
) -> ast.FunctionDef:
    """Build one complete method: URI, envelope, dispatch.

    Nothing is registered in ``tokens`` unless the whole body was built.
    """
    if not is_identifier(method.name):
        raise MalformedMetadataError("method name is not a valid identifier", method_name=method.name)

    verb = method.verb.strip().upper()
    if verb not in HTTP_VERBS:
        raise MalformedMetadataError(f"unsupported HTTP verb {method.verb!r}", method_name=method.name)
    if verb != method.verb:
        method = method.model_copy(update={"verb": verb})

    _check_importable(method)

    params = classify_method(method)
    try:
        body = uri_statements(method.path, params)
    except MalformedMetadataError as exc:
        raise MalformedMetadataError(
            exc.reason, method_name=method.name, parameter_name=exc.parameter_name
        ) from exc
    body.extend(envelope_statements(params))

    token = tokens.register(method.returns)
    body.append(dispatch_statement(method, token, options.transport_field))

    args = [_argument("self")]
    args.extend(_argument(p.name, type_expr(p.type)) for p in method.parameters)

    logger.debug(
        "synthesized %s %r as %s (%d query, %d named, %d positional, %d headers, body=%s)",
        verb,
        method.path,
        method.name,
        len(params.query),
        len(params.named_vars),
        len(params.positional_vars),
        len(params.headers),
        params.body.name if params.body else None,
    )
    return _function_def(method.name, args, body, returns=type_expr(method.returns))
