"""Typed exception hierarchy for rpcdispatch."""

from __future__ import annotations

from typing import Any


class RpcDispatchError(Exception):
    """Base class for all rpcdispatch errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(RpcDispatchError):
    """Raised for configuration issues (missing file, invalid JSON, validation failure)."""


class LoadError(RpcDispatchError):
    """Raised when a JSON file cannot be loaded."""


class RegistrationError(RpcDispatchError):
    """Raised when a procedure or hook is registered incorrectly."""


# === Protocol-level failures (always recovered into an error envelope) ===


class ProtocolError(RpcDispatchError):
    """Base class for request validation failures."""


class MalformedPayloadError(ProtocolError):
    """Payload is not a structured container (object or array)."""


class InvalidEnvelopeError(ProtocolError):
    """Payload is a container but violates the JSON-RPC 2.0 envelope rules."""


class ProcedureNotFoundError(RpcDispatchError):
    """No registry tier could resolve the procedure name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Procedure not found: {name}")


class InvalidParamsError(RpcDispatchError):
    """Raised when request parameters cannot be bound to a procedure."""


class ArityError(InvalidParamsError):
    """Number of supplied parameters is outside the accepted range."""


class MissingNamedArgumentError(InvalidParamsError):
    """A required formal parameter received no value."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"missing argument '{name}'")


class UnexpectedArgumentError(InvalidParamsError):
    """A named parameter does not match any formal parameter."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unexpected argument '{name}'")


# === Codec failures ===


class CodecError(RpcDispatchError):
    """Base class for JSON text encoding/decoding failures.

    Attributes:
        reason: The EncodingFailureReason classifying the failure.
    """

    def __init__(self, reason: Any, detail: str = "") -> None:
        self.reason = reason
        self.detail = detail
        super().__init__(str(reason) if not detail else f"{reason}: {detail}")


class EncodingFailure(CodecError):
    """A response could not be serialized."""


class DecodingFailure(CodecError):
    """A raw request body could not be parsed as JSON."""


# === Out-of-band signals (never turned into an error envelope) ===


class AuthError(RpcDispatchError):
    """Base class for authentication/authorization signals."""

    status: int = 0


class AuthenticationFailedError(AuthError):
    """Credentials are missing or were rejected."""

    status = 401

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class AccessForbiddenError(AuthError):
    """Credentials are valid but not allowed to call the procedure."""

    status = 403

    def __init__(self, message: str = "Access forbidden") -> None:
        super().__init__(message)


# === Application errors raised by procedures ===


class ApplicationError(RpcDispatchError):
    """Convenience base for procedure errors relayed to the client.

    Register the class (or a subclass) with Dispatcher.relay_exception() to have
    it converted into a JSON-RPC error object instead of propagating.
    """

    code: int = -32000

    def __init__(self, message: str, code: int | None = None, data: Any = None) -> None:
        if code is not None:
            self.code = code
        self.data = data
        super().__init__(message)
