"""JSON text codec for requests and responses.

Encoding and decoding failures are classified into EncodingFailureReason
values so that callers can report a human-readable cause (for example as the
"data" member of an Internal error) instead of a raw exception string.
"""

from __future__ import annotations

import json
import logging
import math
from enum import Enum
from typing import Any

from rpcdispatch.config.schema import DispatcherConfig
from rpcdispatch.core.errors import DecodingFailure, EncodingFailure
from rpcdispatch.rpc.protocol import JSONRPC_VERSION
from rpcdispatch.rpc.types import Response

logger = logging.getLogger(__name__)


class EncodingFailureReason(str, Enum):
    """Why a JSON encode or decode failed."""

    DEPTH = "depth"
    STATE_MISMATCH = "state_mismatch"
    CTRL_CHAR = "ctrl_char"
    SYNTAX = "syntax"
    UTF8 = "utf8"
    INF_OR_NAN = "inf_or_nan"
    UNSUPPORTED_TYPE = "unsupported_type"
    UNKNOWN = "unknown"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    def __str__(self) -> str:
        return self.description


_DESCRIPTIONS = {
    EncodingFailureReason.DEPTH: "Maximum stack depth exceeded",
    EncodingFailureReason.STATE_MISMATCH: "Underflow or the modes mismatch (circular reference)",
    EncodingFailureReason.CTRL_CHAR: "Unexpected control character found",
    EncodingFailureReason.SYNTAX: "Syntax error, malformed JSON",
    EncodingFailureReason.UTF8: "Malformed UTF-8 characters, possibly incorrectly encoded",
    EncodingFailureReason.INF_OR_NAN: "Inf and NaN cannot be JSON encoded",
    EncodingFailureReason.UNSUPPORTED_TYPE: "A value of a type that cannot be encoded was given",
    EncodingFailureReason.UNKNOWN: "Unknown error",
}


def nesting_depth(value: Any, limit: int) -> int:
    """Return the container nesting depth of a decoded JSON value.

    Scalars have depth 0; "[]" and "{}" have depth 1. Stops counting once
    the depth exceeds limit, returning limit + 1.
    """
    deepest = 0
    stack: list[tuple[Any, int]] = [(value, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, dict):
            children = node.values()
        elif isinstance(node, (list, tuple)):
            children = node
        else:
            continue
        depth += 1
        if depth > limit:
            return limit + 1
        deepest = max(deepest, depth)
        stack.extend((child, depth) for child in children)
    return deepest


class ResponseCodec:
    """Serializes response envelopes and parses raw request bodies."""

    def __init__(self, config: DispatcherConfig | None = None) -> None:
        self.config = config or DispatcherConfig()

    def encode(self, value: Any) -> str:
        """Serialize a value to compact JSON text.

        Raises:
            EncodingFailure: With the reason the value could not be encoded.
        """
        try:
            text = json.dumps(
                value,
                separators=(",", ":"),
                ensure_ascii=self.config.ensure_ascii,
                allow_nan=self.config.allow_nan,
            )
        except RecursionError as e:
            raise EncodingFailure(EncodingFailureReason.DEPTH) from e
        except TypeError as e:
            raise EncodingFailure(EncodingFailureReason.UNSUPPORTED_TYPE, str(e)) from e
        except ValueError as e:
            raise EncodingFailure(_classify_encode_value_error(e), str(e)) from e

        if nesting_depth(value, self.config.max_depth) > self.config.max_depth:
            raise EncodingFailure(EncodingFailureReason.DEPTH)

        if not self.config.ensure_ascii:
            try:
                text.encode("utf-8")
            except UnicodeEncodeError as e:
                raise EncodingFailure(EncodingFailureReason.UTF8, str(e)) from e

        return text

    def decode(self, body: str | bytes) -> Any:
        """Parse a raw request body.

        Raises:
            DecodingFailure: With the reason the text could not be parsed.
        """
        if isinstance(body, (bytes, bytearray)):
            try:
                body = bytes(body).decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise DecodingFailure(EncodingFailureReason.UTF8, str(e)) from e

        try:
            value = json.loads(body, parse_constant=self._parse_constant)
        except json.JSONDecodeError as e:
            reason = (
                EncodingFailureReason.CTRL_CHAR
                if "control character" in e.msg
                else EncodingFailureReason.SYNTAX
            )
            raise DecodingFailure(reason, str(e)) from e
        except RecursionError as e:
            raise DecodingFailure(EncodingFailureReason.DEPTH) from e
        except ValueError as e:
            raise DecodingFailure(EncodingFailureReason.SYNTAX, str(e)) from e

        if nesting_depth(value, self.config.max_depth) > self.config.max_depth:
            raise DecodingFailure(EncodingFailureReason.DEPTH)
        return value

    def _parse_constant(self, name: str) -> float:
        if not self.config.allow_nan:
            raise ValueError(f"Non-finite number literal not allowed: {name}")
        return {"NaN": math.nan, "Infinity": math.inf, "-Infinity": -math.inf}[name]

    def encode_response(self, response: Response) -> str:
        """Serialize a Response envelope, always emitting output."""
        envelope: dict[str, Any] = {"jsonrpc": response.jsonrpc, "id": response.id}
        envelope.update(response.data())
        return self.encode(envelope)

    def build_response(self, data: dict[str, Any], payload: Any) -> str:
        """Merge a result/error member with the protocol fields and serialize it.

        Args:
            data: Either {"result": value} or {"error": {...}}.
            payload: The originating request object.

        Returns:
            The encoded envelope, or "" if the request was a notification.

        Raises:
            EncodingFailure: If the envelope cannot be serialized.
        """
        if not isinstance(payload, dict) or "id" not in payload:
            return ""
        envelope: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "id": payload["id"]}
        envelope.update(data)
        return self.encode(envelope)


def _classify_encode_value_error(error: ValueError) -> EncodingFailureReason:
    message = str(error)
    if "Circular reference" in message:
        return EncodingFailureReason.STATE_MISMATCH
    if "Out of range float" in message:
        return EncodingFailureReason.INF_OR_NAN
    logger.debug("Unclassified encoding error: %s", message)
    return EncodingFailureReason.UNKNOWN
