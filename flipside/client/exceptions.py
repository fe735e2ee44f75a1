"""
Flipside Client Exceptions.

Defines the exception hierarchy for transport and query-run failures.
"""

from typing import Optional, Dict, Any


class FlipsideError(Exception):
  """Base exception for all Flipside client errors."""

  pass


class RpcError(FlipsideError):
  """
  Transport or protocol failure on a JSON-RPC call.

  Never retried by the client; callers may retry the whole operation.
  """

  def __init__(
    self,
    message: str,
    status_code: Optional[int] = None,
    response_data: Optional[Dict[str, Any]] = None,
  ):
    super().__init__(message)
    self.status_code = status_code
    self.response_data = response_data


class RpcConnectionError(RpcError):
  """
  The request never produced a response.

  Examples: DNS failure, refused connection, TLS errors
  """

  pass


class RpcTimeoutError(RpcConnectionError):
  """HTTP request timeout."""

  pass


class RpcResponseError(RpcError):
  """
  The service answered with something that is not a usable JSON-RPC result.

  Examples: HTTP 5xx without a JSON-RPC body, invalid JSON, a result that does
  not match the schema
  """

  pass


class RpcRemoteError(RpcError):
  """The service returned a JSON-RPC error object."""

  def __init__(
    self,
    code: int,
    message: str,
    data: Any = None,
    status_code: Optional[int] = None,
  ):
    super().__init__(f"JSON-RPC error {code}: {message}", status_code=status_code)
    self.code = code
    self.rpc_message = message
    self.data = data


class QueryRunError(FlipsideError):
  """Base exception for query runs that did not finish successfully."""

  pass


class QueryRunTimeoutError(QueryRunError):
  """
  The client-side wall-clock budget ran out while polling.

  The remote run keeps going and can still be fetched or cancelled by id.
  """

  def __init__(self, elapsed: float, query_run_id: Optional[str] = None):
    super().__init__(
      f"Query run {query_run_id} did not finish within {elapsed:.2f}s"
      if query_run_id
      else f"Query run did not finish within {elapsed:.2f}s"
    )
    self.elapsed = elapsed
    self.query_run_id = query_run_id


class QueryRunExecutionError(QueryRunError):
  """
  The remote run ended FAILED or CANCELLED.

  Carries the error name, message and data reported by the remote engine.
  """

  def __init__(
    self,
    name: str,
    message: str,
    data: Any = None,
    query_run_id: Optional[str] = None,
  ):
    super().__init__(f"{name}: {message}")
    self.name = name
    self.message = message
    self.data = data
    self.query_run_id = query_run_id


class QueryRunRpcError(QueryRunError):
  """
  A JSON-RPC call failed while running a query.

  The underlying RpcError is kept as ``error`` and chained as ``__cause__``.
  ``query_run_id`` is None when submission itself failed.
  """

  def __init__(self, error: RpcError, query_run_id: Optional[str] = None):
    super().__init__(
      f"Query run {query_run_id} aborted: {error}"
      if query_run_id
      else f"Query submission failed: {error}"
    )
    self.error = error
    self.query_run_id = query_run_id
