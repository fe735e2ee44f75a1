"""
Asynchronous JSON-RPC Client.

Issues the four query-run methods over a shared httpx connection pool. Failures
are mapped to the RpcError hierarchy and never retried here.
"""

import time
from typing import Any, Optional, Type

import httpx
from pydantic import BaseModel

from flipside.logger import log_rpc_call, rpc_logger as logger
from flipside.models.rpc import (
  CancelQueryRunResult,
  CreateQueryRunParams,
  CreateQueryRunResult,
  GetQueryRunResult,
  GetQueryRunResultsParams,
  GetQueryRunResultsResult,
  QueryRunIdParams,
)
from .base import BaseRpcClient, T
from .config import RpcClientConfig
from .exceptions import (
  RpcConnectionError,
  RpcError,
  RpcResponseError,
  RpcTimeoutError,
)


class RpcClient(BaseRpcClient):
  """Asynchronous client for the query-run JSON-RPC service."""

  def __init__(
    self,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    config: Optional[RpcClientConfig] = None,
    **kwargs,
  ):
    """
    Initialize asynchronous RPC client.

    Args:
        api_key: API key sent as the x-api-key header
        base_url: JSON-RPC endpoint URL
        config: Client configuration
        **kwargs: Additional config overrides
    """
    super().__init__(api_key, base_url, config, **kwargs)

    limits = httpx.Limits(
      max_connections=self.config.max_connections,
      max_keepalive_connections=self.config.max_keepalive_connections,
      keepalive_expiry=self.config.keepalive_expiry,
    )

    # No base_url: the endpoint is posted to verbatim
    self.client = httpx.AsyncClient(
      timeout=httpx.Timeout(self.config.timeout),
      limits=limits,
      headers=self.config.headers,
      verify=self.config.verify_ssl,
    )

  async def __aenter__(self):
    return self

  async def __aexit__(self, exc_type, exc_val, exc_tb):
    await self.close()

  async def close(self):
    """Close the client and cleanup resources."""
    await self.client.aclose()

  async def _call(
    self, method: str, params: BaseModel, result_type: Type[T]
  ) -> T:
    """
    Invoke a JSON-RPC method.

    Args:
        method: Remote method name
        params: Typed parameter record
        result_type: Model the result is validated against

    Returns:
        Typed result

    Raises:
        RpcConnectionError: If no response was received
        RpcResponseError: If the response is not a usable JSON-RPC result
        RpcRemoteError: If the service returned a JSON-RPC error
    """
    payload = self._build_request(method, params)
    request_id = payload["id"]

    logger.debug(f"Calling {method} (id={request_id})")
    logger.debug(f"Client headers: {self._masked_headers()}")

    start_time = time.monotonic()
    status_code = None
    try:
      try:
        response = await self.client.post(self.config.base_url, json=payload)
      except httpx.TimeoutException as e:
        raise RpcTimeoutError(f"{method}: request timeout: {e}") from e
      except httpx.RequestError as e:
        raise RpcConnectionError(f"{method}: connection error: {e}") from e

      status_code = response.status_code
      try:
        body: Any = response.json()
      except ValueError as e:
        raise RpcResponseError(
          f"{method}: response is not valid JSON (HTTP {status_code})",
          status_code,
          {"detail": response.text},
        ) from e

      result = self._parse_response(method, status_code, body, result_type)
    except RpcError as e:
      log_rpc_call(
        logger,
        method,
        (time.monotonic() - start_time) * 1000,
        success=False,
        status_code=status_code,
        request_id=request_id,
        error=str(e),
      )
      raise

    log_rpc_call(
      logger,
      method,
      (time.monotonic() - start_time) * 1000,
      status_code=status_code,
      request_id=request_id,
    )
    return result

  async def create_query_run(
    self, params: CreateQueryRunParams
  ) -> CreateQueryRunResult:
    """Create a remote query run."""
    return await self._call("createQueryRun", params, CreateQueryRunResult)

  async def get_query_run(self, params: QueryRunIdParams) -> GetQueryRunResult:
    """Fetch a query run, plus the run it was redirected to if any."""
    return await self._call("getQueryRun", params, GetQueryRunResult)

  async def cancel_query_run(self, params: QueryRunIdParams) -> CancelQueryRunResult:
    """Cancel a query run."""
    return await self._call("cancelQueryRun", params, CancelQueryRunResult)

  async def get_query_run_results(
    self, params: GetQueryRunResultsParams
  ) -> GetQueryRunResultsResult:
    """Fetch one page of a query run's results."""
    return await self._call("getQueryRunResults", params, GetQueryRunResultsResult)
