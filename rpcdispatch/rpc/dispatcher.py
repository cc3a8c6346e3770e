"""JSON-RPC 2.0 dispatch engine.

The Dispatcher drives one call through the pipeline:

    shape check -> batch fan-out -> envelope check -> resolution
    -> argument binding -> invocation -> error mapping -> encoding

Every call gets its own DispatchContext (payload + credentials). Batch
elements each get a fresh context that shares the dispatcher's registries,
so parameter state from one element never leaks into another.

Example usage:
    dispatcher = Dispatcher()
    dispatcher.register("sum", lambda a, b: a + b)
    dispatcher.execute({"jsonrpc": "2.0", "method": "sum", "params": [2, 3], "id": 1})
    # '{"jsonrpc":"2.0","id":1,"result":5}'
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from rpcdispatch.config.schema import DispatcherConfig
from rpcdispatch.core.errors import (
    AuthError,
    DecodingFailure,
    EncodingFailure,
    InvalidEnvelopeError,
    InvalidParamsError,
    MalformedPayloadError,
    ProcedureNotFoundError,
)
from rpcdispatch.rpc.binder import bind
from rpcdispatch.rpc.codec import ResponseCodec
from rpcdispatch.rpc.invoker import BeforeHook, Invoker
from rpcdispatch.rpc.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    SERVER_ERROR,
    is_batch,
    make_error_response,
    make_success_response,
    parse_request,
    validate_json_shape,
)
from rpcdispatch.rpc.registry import ProcedureRegistry
from rpcdispatch.rpc.types import Credentials, Request, Response

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class DispatchContext:
    """Per-call state: the payload being processed and the caller's credentials."""

    payload: Any
    credentials: Credentials | None = None


class Dispatcher:
    """Routes JSON-RPC payloads to registered procedures.

    Setup methods (register, bind_class, attach, relay_exception,
    set_before_hook) are meant to be called before the first dispatch.
    """

    def __init__(
        self,
        config: DispatcherConfig | None = None,
        registry: ProcedureRegistry | None = None,
        before_hook: BeforeHook | str | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            config: Encoding and auth settings. Defaults to DispatcherConfig().
            registry: Existing registry to dispatch against. A new one is
                created if omitted.
            before_hook: Hook run before class/instance method targets, or the
                name of a method on the target instance.
        """
        self.config = config or DispatcherConfig()
        self.registry = registry or ProcedureRegistry()
        self.codec = ResponseCodec(self.config)
        self._invoker = Invoker(before_hook)

    # === Setup surface ===

    def register(self, name: str, callback: Callable[..., Any]) -> None:
        """Register a callback under a procedure name."""
        self.registry.register(name, callback)

    def procedure(self, name: str | None = None) -> Callable[[F], F]:
        """Decorator form of register(); defaults to the function's name."""

        def decorator(func: F) -> F:
            self.registry.register(name or func.__name__, func)
            return func

        return decorator

    def bind_class(self, name: str, ref: Any, method_name: str) -> None:
        """Bind a procedure name to a method of a class, instance, or class path."""
        self.registry.bind_class(name, ref, method_name)

    def attach(self, instance: Any) -> None:
        """Expose an instance's public methods as procedures."""
        self.registry.attach(instance)

    def relay_exception(self, kind: type[BaseException]) -> None:
        """Relay exceptions of this kind to clients as JSON-RPC errors."""
        self.registry.relay_exception(kind)

    def set_before_hook(self, hook: BeforeHook | str | None) -> None:
        """Configure the hook run before class/instance method targets."""
        self._invoker.before_hook = hook

    # === Dispatch ===

    def execute(self, payload: Any, credentials: Credentials | None = None) -> str:
        """Dispatch a decoded payload (single request or batch).

        Args:
            payload: Decoded JSON value.
            credentials: Caller credentials passed to the before hook.

        Returns:
            The encoded response, a JSON array for batches, or "" when no
            response is due (notifications).

        Raises:
            AuthenticationFailedError, AccessForbiddenError: Raised by the
                before hook; the transport must answer out-of-band.
            Exception: Any procedure exception whose kind was not registered
                with relay_exception().
        """
        return self._execute(DispatchContext(payload, credentials))

    def handle(self, body: str | bytes, credentials: Credentials | None = None) -> str:
        """Decode a raw request body and dispatch it.

        Undecodable bodies are answered with a Parse error carrying the
        decoder's reason.
        """
        try:
            payload = self.codec.decode(body)
        except DecodingFailure as e:
            logger.debug("Request body could not be decoded: %s", e.message)
            return self._encode_error(None, PARSE_ERROR, str(e.reason))
        return self.execute(payload, credentials)

    def _execute(self, ctx: DispatchContext) -> str:
        try:
            validate_json_shape(ctx.payload)
        except MalformedPayloadError as e:
            logger.debug("Malformed payload: %s", e.message)
            return self._encode_error(None, PARSE_ERROR)

        if is_batch(ctx.payload):
            return self._execute_batch(ctx)
        return self._execute_single(ctx)

    def _execute_batch(self, ctx: DispatchContext) -> str:
        logger.debug("Dispatching batch of %d requests", len(ctx.payload))
        responses: list[str] = []
        for element in ctx.payload:
            if not isinstance(element, (dict, list)):
                responses.append(self._encode_error(None, INVALID_REQUEST))
                continue
            output = self._execute_single(DispatchContext(element, ctx.credentials))
            if output:
                responses.append(output)

        if not responses:
            return ""
        return "[" + ",".join(responses) + "]"

    def _execute_single(self, ctx: DispatchContext) -> str:
        try:
            request = parse_request(ctx.payload)
        except InvalidEnvelopeError as e:
            logger.debug("Invalid request: %s", e.message)
            return self._encode_error(None, INVALID_REQUEST)

        response = self._call(request, ctx.credentials)
        return self._build(response, ctx.payload)

    def _call(self, request: Request, credentials: Credentials | None) -> Response:
        """Resolve, bind and invoke; map recoverable failures to error responses.

        Not-found and invalid-params mapping covers resolution and binding only.
        The same exceptions raised from inside a procedure follow the relay rules.
        """
        try:
            target = self.registry.resolve(request.method)
            bound = bind(request.params, target.signature)
        except ProcedureNotFoundError:
            logger.debug("Method not found: %s", request.method)
            return make_error_response(request.id, METHOD_NOT_FOUND)
        except InvalidParamsError as e:
            logger.debug("Invalid params for %s: %s", request.method, e.message)
            return make_error_response(request.id, INVALID_PARAMS, data=e.message)
        except AuthError:
            raise
        except self.registry.exception_kinds as e:
            # Class references are instantiated during resolution
            logger.debug("Relaying %s from %s", type(e).__name__, request.method)
            return self._relayed_error(request.id, e)

        try:
            result = self._invoker.invoke(target, bound, credentials)
        except AuthError:
            raise
        except self.registry.exception_kinds as e:
            logger.debug("Relaying %s from %s", type(e).__name__, request.method)
            return self._relayed_error(request.id, e)

        return make_success_response(request.id, result)

    def _relayed_error(self, request_id: Any, error: BaseException) -> Response:
        code = getattr(error, "code", SERVER_ERROR)
        if not isinstance(code, int) or isinstance(code, bool):
            code = SERVER_ERROR
        message = getattr(error, "message", None)
        if not isinstance(message, str) or not message:
            message = str(error) or type(error).__name__
        return make_error_response(request_id, code, message, getattr(error, "data", None))

    def _build(self, response: Response, payload: Any) -> str:
        try:
            return self.codec.build_response(response.data(), payload)
        except EncodingFailure as e:
            logger.warning("Failed to encode response for id %r: %s", response.id, e.message)
            error = make_error_response(response.id, INTERNAL_ERROR, data=str(e.reason))
            return self.codec.build_response(error.data(), payload)

    def _encode_error(self, request_id: Any, code: int, data: Any = None) -> str:
        return self.codec.encode_response(make_error_response(request_id, code, data=data))
