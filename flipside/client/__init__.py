"""
Flipside Client - Async client for the query-run JSON-RPC service.
"""

from .client import RpcClient
from .config import RpcClientConfig
from .exceptions import (
  FlipsideError,
  QueryRunError,
  QueryRunExecutionError,
  QueryRunRpcError,
  QueryRunTimeoutError,
  RpcConnectionError,
  RpcError,
  RpcRemoteError,
  RpcResponseError,
  RpcTimeoutError,
)
from .flipside import Flipside
from .sync_client import FlipsideSyncClient

__all__ = [
  "Flipside",
  "FlipsideError",
  "FlipsideSyncClient",
  "QueryRunError",
  "QueryRunExecutionError",
  "QueryRunRpcError",
  "QueryRunTimeoutError",
  "RpcClient",
  "RpcClientConfig",
  "RpcConnectionError",
  "RpcError",
  "RpcRemoteError",
  "RpcResponseError",
  "RpcTimeoutError",
]
