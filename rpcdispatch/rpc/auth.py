"""HTTP Basic credential extraction for the dispatcher.

The transport resolves credentials once per request and passes them to
Dispatcher.execute(); the before hook receives them and may raise
AuthenticationFailedError (401) or AccessForbiddenError (403).

Example usage:
    credentials = extract_basic_credentials(headers)

    def check(username, password, class_name, method_name):
        if credentials is None or not hmac.compare_digest(password or "", expected):
            raise AuthenticationFailedError()

    dispatcher.set_before_hook(check)
"""

from __future__ import annotations

import base64
import binascii
import hmac
import logging

from rpcdispatch.rpc.types import Credentials

logger = logging.getLogger(__name__)


def extract_basic_credentials(headers: dict[str, str]) -> Credentials | None:
    """Extract username/password from an "Authorization: Basic" header.

    Args:
        headers: Header names to values. Names are matched case-insensitively.

    Returns:
        Credentials if a well-formed Basic header is present, None otherwise.
    """
    auth_header = ""
    for name, value in headers.items():
        if name.lower() == "authorization":
            auth_header = value.strip()
            break

    scheme, _, encoded = auth_header.partition(" ")
    if scheme.lower() != "basic" or not encoded.strip():
        return None

    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        logger.debug("Malformed Basic authorization header")
        return None

    username, sep, password = decoded.partition(":")
    if not sep:
        logger.debug("Basic authorization header lacks ':' separator")
        return None

    return Credentials(username=username, password=password)


def credentials_match(provided: Credentials | None, expected: Credentials) -> bool:
    """Compare credentials in constant time.

    Returns:
        True if both username and password match.
    """
    if provided is None or provided.username is None or provided.password is None:
        return False
    user_ok = hmac.compare_digest(
        provided.username.encode("utf-8"), (expected.username or "").encode("utf-8")
    )
    pass_ok = hmac.compare_digest(
        provided.password.encode("utf-8"), (expected.password or "").encode("utf-8")
    )
    return user_ok and pass_ok
