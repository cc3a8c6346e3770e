"""rpcdispatch - JSON-RPC 2.0 request dispatcher."""

from rpcdispatch.config import DispatcherConfig, load_config
from rpcdispatch.core.errors import ApplicationError, RpcDispatchError
from rpcdispatch.rpc import Credentials, Dispatcher

__version__ = "0.1.0"

__all__ = [
    "ApplicationError",
    "Credentials",
    "Dispatcher",
    "DispatcherConfig",
    "RpcDispatchError",
    "load_config",
]
