"""Argument binding: match request params to a procedure's formal parameters.

A Signature is built once per target with describe() and then used by bind()
for every call. Binding never invokes the procedure; it only decides which
values go where, or raises an InvalidParamsError subclass.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from rpcdispatch.core.errors import (
    ArityError,
    MissingNamedArgumentError,
    UnexpectedArgumentError,
)
from rpcdispatch.rpc.protocol import is_positional

logger = logging.getLogger(__name__)

_EMPTY = inspect.Parameter.empty
_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class ParameterSpec:
    """One formal parameter of a procedure.

    Attributes:
        name: Parameter name as declared.
        kind: inspect.Parameter kind (never VAR_POSITIONAL/VAR_KEYWORD).
        default: Default value, or inspect.Parameter.empty if required.
    """

    name: str
    kind: inspect._ParameterKind
    default: Any = _EMPTY

    @property
    def has_default(self) -> bool:
        return self.default is not _EMPTY

    @property
    def positional(self) -> bool:
        return self.kind in _POSITIONAL_KINDS


@dataclass(frozen=True)
class Signature:
    """Registration-time descriptor of a procedure's formal parameters.

    Attributes:
        parameters: Formal parameters in declaration order.
        required_count: Number of parameters without a default.
        max_count: Upper bound on supplied parameters, None when unbounded.
        var_positional: The procedure accepts *args.
        var_keyword: The procedure accepts **kwargs.
    """

    parameters: tuple[ParameterSpec, ...] = ()
    required_count: int = 0
    max_count: int | None = 0
    var_positional: bool = False
    var_keyword: bool = False

    @property
    def max_positional(self) -> int | None:
        if self.var_positional:
            return None
        return sum(1 for p in self.parameters if p.positional)


@dataclass
class BoundArguments:
    """Values ready to be passed to a procedure."""

    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.args) + len(self.kwargs)


def describe(target: Callable[..., Any]) -> Signature:
    """Build a Signature for a callable.

    Bound methods do not include their receiver. Callables whose signature
    cannot be introspected (some builtins) are treated as accepting anything.
    """
    try:
        sig = inspect.signature(target)
    except (TypeError, ValueError):
        logger.debug("No introspectable signature for %r, accepting any params", target)
        return Signature(max_count=None, var_positional=True, var_keyword=True)

    params: list[ParameterSpec] = []
    var_positional = False
    var_keyword = False
    for p in sig.parameters.values():
        if p.kind is inspect.Parameter.VAR_POSITIONAL:
            var_positional = True
        elif p.kind is inspect.Parameter.VAR_KEYWORD:
            var_keyword = True
        else:
            params.append(ParameterSpec(p.name, p.kind, p.default))

    required = sum(1 for p in params if not p.has_default)
    max_count = None if (var_positional or var_keyword) else len(params)
    return Signature(
        parameters=tuple(params),
        required_count=required,
        max_count=max_count,
        var_positional=var_positional,
        var_keyword=var_keyword,
    )


def bind(params: list[Any] | dict[Any, Any], signature: Signature) -> BoundArguments:
    """Bind request params to formal parameters.

    Args:
        params: Positional (list) or named (dict) request parameters.
        signature: Descriptor of the target procedure.

    Returns:
        BoundArguments to call the procedure with.

    Raises:
        ArityError: Too few or too many parameters.
        MissingNamedArgumentError: A required parameter received no value.
        UnexpectedArgumentError: A named parameter matches no formal parameter.
    """
    count = len(params)
    if count < signature.required_count:
        raise ArityError("wrong number of arguments")
    if signature.max_count is not None and count > signature.max_count:
        raise ArityError("too many arguments")

    if is_positional(params):
        return _bind_positional(params, signature)
    return _bind_named(params, signature)


def _bind_positional(
    params: list[Any] | dict[Any, Any], signature: Signature
) -> BoundArguments:
    values = list(params) if isinstance(params, (list, tuple)) else [
        params[i] for i in range(len(params))
    ]

    max_positional = signature.max_positional
    if max_positional is not None and len(values) > max_positional:
        raise ArityError("too many arguments")

    # Keyword-only parameters can't be reached by position
    for param in signature.parameters:
        if not param.positional and not param.has_default:
            raise MissingNamedArgumentError(param.name)

    return BoundArguments(args=tuple(values))


def _bind_named(params: dict[Any, Any], signature: Signature) -> BoundArguments:
    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    known = set()

    for param in signature.parameters:
        known.add(param.name)
        if param.name in params:
            value = params[param.name]
        elif param.has_default:
            value = param.default
        else:
            raise MissingNamedArgumentError(param.name)

        if param.positional:
            args.append(value)
        else:
            kwargs[param.name] = value

    for name in params:
        if name in known:
            continue
        if not signature.var_keyword or not isinstance(name, str):
            raise UnexpectedArgumentError(str(name))
        kwargs[name] = params[name]

    return BoundArguments(args=tuple(args), kwargs=kwargs)
