"""Procedure registry with three resolution tiers.

Procedures are looked up by name in a fixed priority order:

1. Callbacks: plain callables registered under a name.
2. Class bindings: (class, instance or import path, method name) pairs.
3. Attached instances: objects whose public methods are matched by name.

The first tier that produces a target wins. Registries are populated during
setup and only read while dispatching; resolution results are not cached.

Example:
    registry = ProcedureRegistry()
    registry.register("sum", lambda a, b: a + b)
    registry.bind_class("invoice.total", "billing.invoices:Invoices", "total")
    registry.attach(MathService())

    target = registry.resolve("sum")
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from rpcdispatch.core.errors import ProcedureNotFoundError, RegistrationError
from rpcdispatch.rpc.binder import Signature, describe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallbackTarget:
    """A directly invocable callback."""

    name: str
    callable: Callable[..., Any]
    signature: Signature


@dataclass(frozen=True)
class ClassMethodTarget:
    """A method reached through an explicit class binding."""

    name: str
    instance: Any
    class_name: str
    method_name: str
    callable: Callable[..., Any]
    signature: Signature


@dataclass(frozen=True)
class InstanceMethodTarget:
    """A method found by name on an attached instance."""

    name: str
    instance: Any
    class_name: str
    method_name: str
    callable: Callable[..., Any]
    signature: Signature


Target = CallbackTarget | ClassMethodTarget | InstanceMethodTarget


@dataclass(frozen=True)
class ClassBinding:
    """A procedure bound to a method of a class, instance, or importable class path."""

    ref: Any
    method_name: str


def import_class(path: str) -> type | None:
    """Import a class from "package.module:Class" or "package.module.Class".

    Returns:
        The class, or None if the module or attribute doesn't exist.
    """
    if ":" in path:
        module_name, _, attr = path.partition(":")
    else:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        return None

    try:
        module = importlib.import_module(module_name)
    except ImportError:
        logger.debug("Class binding module not importable: %s", module_name)
        return None

    cls = getattr(module, attr, None)
    return cls if isinstance(cls, type) else None


class ProcedureRegistry:
    """Registry of callable procedures and relayable exception kinds.

    Attributes:
        _callbacks: Procedure name -> CallbackTarget.
        _class_bindings: Procedure name -> ClassBinding.
        _instances: Attached instances, scanned in attachment order.
        _exception_kinds: Exception classes relayed to clients as errors.
    """

    def __init__(self) -> None:
        self._callbacks: dict[str, CallbackTarget] = {}
        self._class_bindings: dict[str, ClassBinding] = {}
        self._instances: list[Any] = []
        self._exception_kinds: tuple[type[BaseException], ...] = ()

    # === Setup ===

    def register(self, name: str, callback: Callable[..., Any]) -> None:
        """Register a callback under a procedure name.

        Raises:
            RegistrationError: If the name is taken or callback isn't callable.
        """
        if not callable(callback):
            raise RegistrationError(f"Callback for '{name}' is not callable")
        if name in self._callbacks:
            raise RegistrationError(f"Callback already registered: {name}")
        self._callbacks[name] = CallbackTarget(name, callback, describe(callback))
        logger.debug("Registered callback: %s", name)

    def bind_class(self, name: str, ref: Any, method_name: str) -> None:
        """Bind a procedure name to a method of a class or instance.

        Args:
            name: Procedure name.
            ref: A class (instantiated with no arguments on each call), an
                instance, or an import path like "package.module:Class".
            method_name: Name of the method to call.

        Raises:
            RegistrationError: If the name is already bound.
        """
        if name in self._class_bindings:
            raise RegistrationError(f"Class binding already registered: {name}")
        self._class_bindings[name] = ClassBinding(ref, method_name)
        logger.debug("Bound %s -> %r.%s", name, ref, method_name)

    def attach(self, instance: Any) -> None:
        """Attach an instance whose public methods become procedures."""
        if isinstance(instance, type):
            raise RegistrationError(
                f"attach() expects an instance, got class {instance.__name__}"
            )
        self._instances.append(instance)
        logger.debug("Attached instance of %s", type(instance).__name__)

    def relay_exception(self, kind: type[BaseException]) -> None:
        """Relay exceptions of this kind (and subclasses) to the client."""
        if not (isinstance(kind, type) and issubclass(kind, BaseException)):
            raise RegistrationError(f"Not an exception class: {kind!r}")
        if kind not in self._exception_kinds:
            self._exception_kinds = (*self._exception_kinds, kind)

    @property
    def exception_kinds(self) -> tuple[type[BaseException], ...]:
        return self._exception_kinds

    def names(self) -> list[str]:
        """Return explicitly registered procedure names (callbacks, then class bindings)."""
        return list(self._callbacks) + [
            n for n in self._class_bindings if n not in self._callbacks
        ]

    # === Resolution ===

    def resolve(self, name: str) -> Target:
        """Resolve a procedure name to a target.

        Raises:
            ProcedureNotFoundError: If no tier resolves the name.
        """
        target = self._callbacks.get(name)
        if target is not None:
            logger.debug("Resolved %s via callback", name)
            return target

        class_target = self._resolve_class_binding(name)
        if class_target is not None:
            logger.debug("Resolved %s via class binding", name)
            return class_target

        instance_target = self._resolve_instance(name)
        if instance_target is not None:
            logger.debug("Resolved %s via attached instance", name)
            return instance_target

        raise ProcedureNotFoundError(name)

    def _resolve_class_binding(self, name: str) -> ClassMethodTarget | None:
        binding = self._class_bindings.get(name)
        if binding is None:
            return None

        ref = binding.ref
        if isinstance(ref, str):
            ref = import_class(ref)
            if ref is None:
                logger.debug("Class for %s does not exist: %s", name, binding.ref)
                return None

        owner = ref if isinstance(ref, type) else type(ref)
        if not callable(getattr(owner, binding.method_name, None)):
            logger.debug("Method %s missing on %s", binding.method_name, owner.__name__)
            return None

        instance = ref() if isinstance(ref, type) else ref
        method = getattr(instance, binding.method_name)
        return ClassMethodTarget(
            name=name,
            instance=instance,
            class_name=owner.__name__,
            method_name=binding.method_name,
            callable=method,
            signature=describe(method),
        )

    def _resolve_instance(self, name: str) -> InstanceMethodTarget | None:
        if name.startswith("_"):
            return None
        for instance in self._instances:
            method = getattr(instance, name, None)
            if callable(method):
                return InstanceMethodTarget(
                    name=name,
                    instance=instance,
                    class_name=type(instance).__name__,
                    method_name=name,
                    callable=method,
                    signature=describe(method),
                )
        return None
