"""Core error types."""

from rpcdispatch.core.errors import (
    AccessForbiddenError,
    ApplicationError,
    ArityError,
    AuthenticationFailedError,
    AuthError,
    CodecError,
    ConfigError,
    DecodingFailure,
    EncodingFailure,
    InvalidEnvelopeError,
    InvalidParamsError,
    LoadError,
    MalformedPayloadError,
    MissingNamedArgumentError,
    ProcedureNotFoundError,
    ProtocolError,
    RegistrationError,
    RpcDispatchError,
    UnexpectedArgumentError,
)

__all__ = [
    "RpcDispatchError",
    "ConfigError",
    "LoadError",
    "RegistrationError",
    # Validation
    "ProtocolError",
    "MalformedPayloadError",
    "InvalidEnvelopeError",
    # Resolution and binding
    "ProcedureNotFoundError",
    "InvalidParamsError",
    "ArityError",
    "MissingNamedArgumentError",
    "UnexpectedArgumentError",
    # Codec
    "CodecError",
    "EncodingFailure",
    "DecodingFailure",
    # Out-of-band signals
    "AuthError",
    "AuthenticationFailedError",
    "AccessForbiddenError",
    # Procedures
    "ApplicationError",
]
