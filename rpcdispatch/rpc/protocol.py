"""JSON-RPC 2.0 envelope validation and response construction.

The validators in this module are pure: they only look at the payload and
never consult the procedure registries.
"""

from typing import Any

from rpcdispatch.core.errors import InvalidEnvelopeError, MalformedPayloadError
from rpcdispatch.rpc.types import Request, Response

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
SERVER_ERROR = -32000  # Server error range: -32000 to -32099

ERROR_MESSAGES: dict[int, str] = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid Request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
    INTERNAL_ERROR: "Internal error",
    SERVER_ERROR: "Server error",
}

JSONRPC_VERSION = "2.0"


def validate_json_shape(payload: Any) -> None:
    """Check that a decoded payload is a structured container.

    Raises:
        MalformedPayloadError: If the payload is a scalar, string or null.
    """
    if not isinstance(payload, (dict, list)):
        raise MalformedPayloadError(
            f"Payload must be an object or array, got: {type(payload).__name__}"
        )


def validate_envelope(payload: Any) -> None:
    """Check a single request object against the JSON-RPC 2.0 envelope rules.

    The "id" member is deliberately not inspected.

    Raises:
        InvalidEnvelopeError: If jsonrpc/method/params are missing or invalid.
    """
    if not isinstance(payload, dict):
        raise InvalidEnvelopeError(
            f"Request must be an object, got: {type(payload).__name__}"
        )

    if "jsonrpc" not in payload:
        raise InvalidEnvelopeError("Missing 'jsonrpc' member")
    jsonrpc = payload["jsonrpc"]
    if not isinstance(jsonrpc, str) or jsonrpc != JSONRPC_VERSION:
        raise InvalidEnvelopeError(f"jsonrpc must be '2.0', got: {jsonrpc!r}")

    if "method" not in payload:
        raise InvalidEnvelopeError("Missing 'method' member")
    method = payload["method"]
    if not isinstance(method, str):
        raise InvalidEnvelopeError(
            f"method must be a string, got: {type(method).__name__}"
        )

    if "params" in payload and not isinstance(payload["params"], (dict, list)):
        raise InvalidEnvelopeError(
            f"params must be object or array, got: {type(payload['params']).__name__}"
        )


def is_batch(payload: Any) -> bool:
    """Return True if the payload is a batch (a non-empty ordered list).

    An empty list is not a batch; it falls through to envelope validation
    and is answered with a single Invalid Request error.
    """
    return isinstance(payload, list) and len(payload) > 0


def is_positional(params: Any) -> bool:
    """Return True if params use the positional calling convention.

    Lists and tuples are positional. A mapping counts as positional only when
    its keys are exactly the integers 0..n-1.
    """
    if isinstance(params, (list, tuple)):
        return True
    if isinstance(params, dict):
        keys = list(params)
        return all(type(k) is int for k in keys) and sorted(keys) == list(range(len(keys)))
    return False


def parse_request(payload: dict[str, Any]) -> Request:
    """Validate a single request object and build a Request from it.

    Args:
        payload: A decoded request object.

    Returns:
        A parsed Request; params are normalized to an empty list if absent or empty.

    Raises:
        InvalidEnvelopeError: If the envelope is invalid.
    """
    validate_envelope(payload)

    params = payload.get("params") or []
    if isinstance(params, dict) and is_positional(params):
        params = [params[i] for i in range(len(params))]

    return Request(
        jsonrpc=payload["jsonrpc"],
        method=payload["method"],
        params=params,
        id=payload.get("id"),
        is_notification="id" not in payload,
    )


def make_error_response(
    request_id: Any,
    code: int,
    message: str | None = None,
    data: Any = None,
) -> Response:
    """Create an error response.

    Args:
        request_id: The id from the original request (None before the envelope
            was validated).
        code: JSON-RPC error code.
        message: Human-readable error message. Defaults to the standard text
            for well-known codes.
        data: Optional additional error data.

    Returns:
        A Response with the error field populated.
    """
    if message is None:
        message = ERROR_MESSAGES.get(code, ERROR_MESSAGES[SERVER_ERROR])

    error: dict[str, Any] = {
        "code": code,
        "message": message,
    }
    if data is not None:
        error["data"] = data

    return Response(
        jsonrpc=JSONRPC_VERSION,
        id=request_id,
        error=error,
    )


def make_success_response(request_id: Any, result: Any) -> Response:
    """Create a success response."""
    return Response(
        jsonrpc=JSONRPC_VERSION,
        id=request_id,
        result=result,
    )
