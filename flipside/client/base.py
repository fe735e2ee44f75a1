"""
Base JSON-RPC Client.

Construction-time validation, request envelopes and response/error mapping,
independent of the HTTP library doing the I/O.
"""

import uuid
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from flipside.config import env
from flipside.config.constants import API_KEY_HEADER
from flipside.logger import rpc_logger as logger
from .config import RpcClientConfig
from .exceptions import (
  RpcError,
  RpcRemoteError,
  RpcResponseError,
)

T = TypeVar("T", bound=BaseModel)

JSONRPC_VERSION = "2.0"


class BaseRpcClient:
  """Base class for JSON-RPC clients with shared functionality."""

  def __init__(
    self,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    config: Optional[RpcClientConfig] = None,
    **kwargs,
  ):
    """
    Initialize the client.

    Args:
        api_key: API key sent as the x-api-key header (default: FLIPSIDE_API_KEY)
        base_url: JSON-RPC endpoint URL (default: FLIPSIDE_BASE_URL)
        config: Client configuration
        **kwargs: Additional config overrides

    Raises:
        ValueError: If the API key is missing or not a valid header value, or
            the URL is not an absolute http(s) URL
    """
    base_config = config or RpcClientConfig.from_env()

    base_url = base_url or base_config.base_url or env.FLIPSIDE_BASE_URL
    self._validate_base_url(base_url)

    api_key = api_key or env.FLIPSIDE_API_KEY
    self._validate_api_key(api_key)

    headers = dict(kwargs.pop("headers", None) or base_config.headers)
    headers[API_KEY_HEADER] = api_key
    self.config = base_config.with_overrides(
      base_url=base_url, headers=headers, **kwargs
    )

    logger.debug(f"RPC client configured for {self.config.base_url}")

  @staticmethod
  def _validate_base_url(base_url: str) -> None:
    try:
      url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as e:
      raise ValueError(f"Invalid base URL {base_url!r}: {e}") from e

    if url.scheme not in ("http", "https") or not url.host:
      raise ValueError(f"Invalid base URL {base_url!r}: expected an http(s) URL")

  @staticmethod
  def _validate_api_key(api_key: Optional[str]) -> None:
    if not api_key:
      raise ValueError("api_key must be provided or set in FLIPSIDE_API_KEY")

    try:
      api_key.encode("ascii")
    except UnicodeEncodeError as e:
      raise ValueError("api_key is not a valid header value: non-ASCII characters") from e

    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in api_key):
      raise ValueError("api_key is not a valid header value: control characters")

  def _masked_headers(self) -> Dict[str, str]:
    headers = dict(self.config.headers)
    if API_KEY_HEADER in headers:
      headers[API_KEY_HEADER] = headers[API_KEY_HEADER][:8] + "..."
    return headers

  @staticmethod
  def _build_request(method: str, params: BaseModel) -> Dict[str, Any]:
    """Build a JSON-RPC request envelope; params travel as a one-element list."""
    return {
      "jsonrpc": JSONRPC_VERSION,
      "method": method,
      "params": [params.model_dump(mode="json", by_alias=True)],
      "id": uuid.uuid4().hex,
    }

  def _parse_response(
    self,
    method: str,
    status_code: int,
    body: Any,
    result_type: Type[T],
  ) -> T:
    """
    Turn a decoded response body into a typed result.

    Args:
        method: JSON-RPC method name
        status_code: HTTP status code
        body: Decoded JSON body
        result_type: Model to validate the result against

    Returns:
        Validated result model

    Raises:
        RpcRemoteError: If the body carries a JSON-RPC error object
        RpcResponseError: If the body is not a usable JSON-RPC response
    """
    if not isinstance(body, dict):
      raise RpcResponseError(
        f"{method}: expected a JSON-RPC object, got {type(body).__name__}",
        status_code,
      )

    error = body.get("error")
    if error is not None:
      raise self._handle_rpc_error(error, status_code, body)

    if status_code >= 400:
      raise RpcResponseError(
        f"{method}: HTTP {status_code} without a JSON-RPC error", status_code, body
      )

    if "result" not in body:
      raise RpcResponseError(f"{method}: response has no result", status_code, body)

    try:
      return result_type.model_validate(body["result"])
    except ValidationError as e:
      raise RpcResponseError(
        f"{method}: result does not match {result_type.__name__}: {e}",
        status_code,
        body,
      ) from e

  @staticmethod
  def _handle_rpc_error(
    error: Any, status_code: int, response_data: Dict[str, Any]
  ) -> RpcError:
    """Convert a JSON-RPC error object to an exception."""
    if not isinstance(error, dict):
      return RpcResponseError(
        f"Malformed JSON-RPC error: {error!r}", status_code, response_data
      )

    return RpcRemoteError(
      code=error.get("code", 0),
      message=error.get("message", "Unknown error"),
      data=error.get("data"),
      status_code=status_code,
    )
