"""
Caller-side query description.
"""

from dataclasses import dataclass
from typing import Optional

from flipside.config.constants import (
  CACHED,
  DATA_PROVIDER,
  DATA_SOURCE,
  MAX_AGE_MINUTES,
  RETRY_INTERVAL_SECONDS,
  TIMEOUT_SECONDS,
  TTL_MINUTES,
)
from .rpc import CreateQueryRunParams


@dataclass(frozen=True)
class Query:
  """
  A SQL query to run remotely, plus optional overrides of the run defaults.

  Attributes:
      sql: SQL text handed to the remote engine as-is
      max_age_minutes: Oldest cached result (in minutes) that may be reused
      cached: False forces re-execution regardless of max_age_minutes
      timeout_seconds: Wall-clock budget for the whole run, polling included
      retry_interval_seconds: Base polling interval; grows linearly per poll
      data_source: Data source to execute against
      data_provider: Owner of the data source
  """

  sql: str
  max_age_minutes: Optional[int] = None
  cached: Optional[bool] = None
  timeout_seconds: Optional[float] = None
  retry_interval_seconds: Optional[float] = None
  data_source: Optional[str] = None
  data_provider: Optional[str] = None

  def __post_init__(self):
    if not self.sql or not self.sql.strip():
      raise ValueError("sql must not be empty")
    if self.max_age_minutes is not None and self.max_age_minutes < 0:
      raise ValueError("max_age_minutes must be >= 0")
    if self.timeout_seconds is not None and self.timeout_seconds <= 0:
      raise ValueError("timeout_seconds must be > 0")
    if self.retry_interval_seconds is not None and self.retry_interval_seconds <= 0:
      raise ValueError("retry_interval_seconds must be > 0")

  @property
  def resolved_max_age_minutes(self) -> int:
    cached = CACHED if self.cached is None else self.cached
    if not cached:
      return 0
    if self.max_age_minutes is None:
      return MAX_AGE_MINUTES
    return self.max_age_minutes

  @property
  def resolved_ttl_hours(self) -> int:
    # Stored results never expire before they stop being reusable
    return max(self.resolved_max_age_minutes, TTL_MINUTES) // 60

  @property
  def resolved_timeout_seconds(self) -> float:
    return TIMEOUT_SECONDS if self.timeout_seconds is None else self.timeout_seconds

  @property
  def resolved_retry_interval_seconds(self) -> float:
    if self.retry_interval_seconds is None:
      return RETRY_INTERVAL_SECONDS
    return self.retry_interval_seconds

  def to_create_params(self) -> CreateQueryRunParams:
    """Build the createQueryRun parameters with defaults filled in."""
    return CreateQueryRunParams(
      result_ttl_hours=self.resolved_ttl_hours,
      max_age_minutes=self.resolved_max_age_minutes,
      sql=self.sql,
      tags={},
      data_source=self.data_source or DATA_SOURCE,
      data_provider=self.data_provider or DATA_PROVIDER,
    )
