"""Transport adapter: turn an HTTP body + headers into a status and body.

This module does no socket or connection handling. A server hands it the
request body and headers, and writes back whatever HttpReply it returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rpcdispatch.core.errors import AccessForbiddenError, AuthenticationFailedError
from rpcdispatch.rpc.auth import extract_basic_credentials
from rpcdispatch.rpc.dispatcher import Dispatcher
from rpcdispatch.rpc.protocol import INVALID_REQUEST, make_error_response

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    200: "OK",
    204: "No Content",
    401: "Unauthorized",
    403: "Forbidden",
}


@dataclass
class HttpReply:
    """What a transport should send back.

    Attributes:
        status: HTTP status code.
        body: Response body (empty for 204).
        headers: Extra response headers.
    """

    status: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def reason(self) -> str:
        return STATUS_MESSAGES.get(self.status, "Unknown")


def handle_http(
    dispatcher: Dispatcher,
    body: str | bytes,
    headers: dict[str, str] | None = None,
) -> HttpReply:
    """Dispatch a raw HTTP request body.

    Args:
        dispatcher: The dispatcher to run the request through.
        body: Raw request body.
        headers: Request headers; used for Basic credential extraction.

    Returns:
        200 with the JSON response, 204 when no response is due, 401 or 403
        when the before hook rejected the caller.
    """
    credentials = extract_basic_credentials(headers or {})
    json_headers = {"Content-Type": "application/json; charset=utf-8"}

    try:
        output = dispatcher.handle(body, credentials)
    except AuthenticationFailedError as e:
        logger.info("Authentication failed: %s", e.message)
        realm = dispatcher.config.auth_realm
        return HttpReply(
            401,
            _signal_body(dispatcher, e.message),
            {**json_headers, "WWW-Authenticate": f'Basic realm="{realm}"'},
        )
    except AccessForbiddenError as e:
        logger.info("Access forbidden: %s", e.message)
        return HttpReply(403, _signal_body(dispatcher, e.message), json_headers)

    if not output:
        return HttpReply(204, "")
    return HttpReply(200, output, json_headers)


def _signal_body(dispatcher: Dispatcher, message: str) -> str:
    return dispatcher.codec.encode_response(
        make_error_response(None, INVALID_REQUEST, message)
    )
