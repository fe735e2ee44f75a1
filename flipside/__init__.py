"""
Flipside - client for the Flipside query-run service.

Submit SQL, wait for the run to finish and page through its results.
"""

from .client import (
  Flipside,
  FlipsideError,
  FlipsideSyncClient,
  QueryRunError,
  QueryRunExecutionError,
  QueryRunRpcError,
  QueryRunTimeoutError,
  RpcClient,
  RpcClientConfig,
  RpcConnectionError,
  RpcError,
  RpcRemoteError,
  RpcResponseError,
  RpcTimeoutError,
)
from .models import (
  ColumnType,
  Filter,
  FilterKey,
  GetQueryRunResultsResult,
  Pagination,
  Query,
  QueryRun,
  QueryState,
  SortBy,
)

__all__ = [
  "ColumnType",
  "Filter",
  "FilterKey",
  "Flipside",
  "FlipsideError",
  "FlipsideSyncClient",
  "GetQueryRunResultsResult",
  "Pagination",
  "Query",
  "QueryRun",
  "QueryRunError",
  "QueryRunExecutionError",
  "QueryRunRpcError",
  "QueryRunTimeoutError",
  "QueryState",
  "RpcClient",
  "RpcClientConfig",
  "RpcConnectionError",
  "RpcError",
  "RpcRemoteError",
  "RpcResponseError",
  "RpcTimeoutError",
  "SortBy",
]
