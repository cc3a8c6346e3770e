"""JSON-RPC 2.0 types for the dispatcher."""

from dataclasses import dataclass
from typing import Any


@dataclass
class Request:
    """JSON-RPC 2.0 request.

    Attributes:
        jsonrpc: Protocol version, must be "2.0".
        method: Name of the procedure to invoke.
        params: Positional (list) or named (dict) parameters; empty list if absent.
        id: Request identifier echoed in the response. May legitimately be None.
        is_notification: True when the request carried no "id" key at all.
    """

    jsonrpc: str
    method: str
    params: list[Any] | dict[Any, Any]
    id: Any = None
    is_notification: bool = False


@dataclass
class Response:
    """JSON-RPC 2.0 response.

    Attributes:
        jsonrpc: Protocol version, always "2.0".
        id: Request identifier from the original request.
        result: Result of the procedure call (mutually exclusive with error).
        error: Error object if the call failed (mutually exclusive with result).
    """

    jsonrpc: str
    id: Any
    result: Any | None = None
    error: dict[str, Any] | None = None

    def data(self) -> dict[str, Any]:
        """Return the result-or-error member to merge into the envelope."""
        if self.error is not None:
            return {"error": self.error}
        return {"result": self.result}


@dataclass(frozen=True)
class Credentials:
    """Username/password pair resolved by the transport for one dispatch call."""

    username: str | None = None
    password: str | None = None

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password=***)"
