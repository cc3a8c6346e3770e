"""JSON-RPC 2.0 request dispatching.

Example usage:
    from rpcdispatch.rpc import Dispatcher

    dispatcher = Dispatcher()

    @dispatcher.procedure()
    def sum(a, b):
        return a + b

    dispatcher.handle('{"jsonrpc":"2.0","method":"sum","params":[2,3],"id":1}')
    # '{"jsonrpc":"2.0","id":1,"result":5}'
"""

from rpcdispatch.rpc.auth import credentials_match, extract_basic_credentials
from rpcdispatch.rpc.binder import BoundArguments, ParameterSpec, Signature, bind, describe
from rpcdispatch.rpc.codec import EncodingFailureReason, ResponseCodec
from rpcdispatch.rpc.dispatcher import DispatchContext, Dispatcher
from rpcdispatch.rpc.http import HttpReply, handle_http
from rpcdispatch.rpc.invoker import Invoker
from rpcdispatch.rpc.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    SERVER_ERROR,
    is_batch,
    is_positional,
    make_error_response,
    make_success_response,
    parse_request,
    validate_envelope,
    validate_json_shape,
)
from rpcdispatch.rpc.registry import (
    CallbackTarget,
    ClassMethodTarget,
    InstanceMethodTarget,
    ProcedureRegistry,
)
from rpcdispatch.rpc.types import Credentials, Request, Response

__all__ = [
    # Types
    "Request",
    "Response",
    "Credentials",
    "DispatchContext",
    # Validation
    "validate_json_shape",
    "validate_envelope",
    "is_batch",
    "is_positional",
    "parse_request",
    "make_error_response",
    "make_success_response",
    # Error codes
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "SERVER_ERROR",
    # Binding
    "ParameterSpec",
    "Signature",
    "BoundArguments",
    "describe",
    "bind",
    # Registry
    "ProcedureRegistry",
    "CallbackTarget",
    "ClassMethodTarget",
    "InstanceMethodTarget",
    # Invocation and dispatch
    "Invoker",
    "Dispatcher",
    # Codec
    "ResponseCodec",
    "EncodingFailureReason",
    # Transport helpers
    "extract_basic_credentials",
    "credentials_match",
    "HttpReply",
    "handle_http",
]
