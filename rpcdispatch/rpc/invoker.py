"""Procedure invocation with an optional pre-invocation hook."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from rpcdispatch.rpc.binder import BoundArguments
from rpcdispatch.rpc.registry import CallbackTarget, Target
from rpcdispatch.rpc.types import Credentials

logger = logging.getLogger(__name__)

# Called as hook(username, password, class_name, method_name)
BeforeHook = Callable[[str | None, str | None, str, str], Any]


class Invoker:
    """Calls resolved targets, running the before hook for object-bound targets.

    The hook is either a callable or the name of a method on the target
    instance; targets without that method are invoked without a hook. It may raise AuthenticationFailedError or AccessForbiddenError
    to reject the call; anything it raises propagates unchanged.
    """

    def __init__(self, before_hook: BeforeHook | str | None = None) -> None:
        self.before_hook = before_hook

    def invoke(
        self,
        target: Target,
        bound: BoundArguments,
        credentials: Credentials | None = None,
    ) -> Any:
        """Invoke a target once, synchronously."""
        if not isinstance(target, CallbackTarget) and self.before_hook is not None:
            self._run_before_hook(target, credentials or Credentials())

        return target.callable(*bound.args, **bound.kwargs)

    def _run_before_hook(self, target: Target, credentials: Credentials) -> None:
        hook = self.before_hook
        if isinstance(hook, str):
            method = getattr(target.instance, hook, None)
            if not callable(method):
                logger.debug("No before hook '%s' on %s, skipping", hook, target.class_name)
                return
            hook = method

        logger.debug("Running before hook for %s.%s", target.class_name, target.method_name)
        hook(
            credentials.username,
            credentials.password,
            target.class_name,
            target.method_name,
        )
