"""
RPC Client Configuration.

HTTP transport settings for the JSON-RPC client. Query-run behaviour (cache
age, polling, timeouts) is configured per Query instead.
"""

import dataclasses
import os
from typing import Dict, Any
from dataclasses import dataclass, field

from flipside.config.constants import (
  DEFAULT_HTTP_TIMEOUT,
  DEFAULT_KEEPALIVE_EXPIRY,
  DEFAULT_MAX_CONNECTIONS,
  DEFAULT_MAX_KEEPALIVE_CONNECTIONS,
)


@dataclass
class RpcClientConfig:
  """Configuration for the JSON-RPC client."""

  base_url: str = ""
  # Per-request HTTP timeout (seconds); not the query-run timeout
  timeout: float = DEFAULT_HTTP_TIMEOUT

  # Connection pool, shared by every call on one client
  max_connections: int = DEFAULT_MAX_CONNECTIONS
  max_keepalive_connections: int = DEFAULT_MAX_KEEPALIVE_CONNECTIONS
  keepalive_expiry: float = DEFAULT_KEEPALIVE_EXPIRY

  headers: Dict[str, str] = field(default_factory=dict)
  verify_ssl: bool = True

  @classmethod
  def from_env(cls, prefix: str = "FLIPSIDE_CLIENT_") -> "RpcClientConfig":
    """
    Create configuration from environment variables.

    Each scalar field maps to ``<prefix><FIELD_NAME>``, e.g.
    FLIPSIDE_CLIENT_TIMEOUT. Headers cannot be set this way.

    Args:
        prefix: Environment variable prefix

    Returns:
        RpcClientConfig instance
    """
    values: Dict[str, Any] = {}

    for config_field in dataclasses.fields(cls):
      if config_field.name == "headers":
        continue

      raw = os.environ.get(prefix + config_field.name.upper())
      if raw is None:
        continue

      default = config_field.default
      if isinstance(default, bool):
        values[config_field.name] = raw.lower() in ("true", "1", "yes")
      elif isinstance(default, (int, float)):
        values[config_field.name] = type(default)(raw)
      else:
        values[config_field.name] = raw

    return cls(**values)

  def with_overrides(self, **kwargs: Any) -> "RpcClientConfig":
    """Return a copy with the given fields replaced; headers are copied."""
    kwargs.setdefault("headers", dict(self.headers))
    return dataclasses.replace(self, **kwargs)
