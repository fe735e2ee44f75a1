"""
Structured logging for the Flipside client.

Records are emitted as single-line JSON objects carrying the query-run and RPC
context attached through ``extra=``, so they can be filtered by component,
action or run id. Levels and handler tiers depend on the environment:

- prod: INFO, errors to stderr, everything else to stdout
- staging: INFO plus a debug tier
- test: WARNING only
- dev: plain-text console at DEBUG (or FLIPSIDE_LOG_LEVEL)

Only the ``flipside`` logger tree is configured.
"""

import json
import logging
import logging.config
import traceback
from datetime import datetime, timezone
from typing import Any

from flipside.config.env import EnvConfig

APP_LOGGERS = ["flipside", "flipside.rpc"]

# Optional record attributes copied into the JSON payload, in output order
CONTEXT_FIELDS = (
  "action",
  "rpc_method",
  "query_run_id",
  "state",
  "duration_ms",
  "status_code",
  "request_id",
  "metadata",
)

# environment -> (default level, debug tier enabled)
ENVIRONMENT_LEVELS = {
  "prod": ("INFO", False),
  "staging": ("INFO", True),
  "test": ("WARNING", False),
  "dev": ("DEBUG", False),  # console handler only
}

# tier -> [lowest level, level it stops at)
LOG_TIERS = {
  "critical": (logging.ERROR, None),
  "operational": (logging.INFO, logging.ERROR),
  "debug": (logging.DEBUG, logging.INFO),
}


class StructuredFormatter(logging.Formatter):
  """Format records as compact JSON with the client's context fields."""

  def format(self, record: logging.LogRecord) -> str:
    created = datetime.fromtimestamp(record.created, tz=timezone.utc)
    payload: dict[str, Any] = {
      "timestamp": created.isoformat().replace("+00:00", "Z"),
      "level": record.levelname,
      "component": getattr(record, "component", record.name),
      "message": record.getMessage(),
    }

    for field in CONTEXT_FIELDS:
      value = getattr(record, field, None)
      if value is not None:
        payload[field] = value

    if record.levelno >= logging.ERROR:
      if record.exc_info and record.exc_info[0]:
        exc_type, exc_value, _ = record.exc_info
        payload["error"] = {
          "type": exc_type.__name__,
          "message": str(exc_value),
          "traceback": traceback.format_exception(*record.exc_info),
        }
      if hasattr(record, "error_category"):
        payload["error_category"] = record.error_category

    return json.dumps(payload, default=str, separators=(",", ":"))


class TieredLogFilter:
  """Pass only records whose level falls inside one tier of LOG_TIERS."""

  def __init__(self, tier: str):
    self.tier = tier
    self.low, self.high = LOG_TIERS.get(tier, (logging.NOTSET, None))

  def filter(self, record: logging.LogRecord) -> bool:
    if record.levelno < self.low:
      return False
    return self.high is None or record.levelno < self.high


def _tier_handler(tier: str, level: str, formatter: str, stream: str) -> dict:
  return {
    "class": "logging.StreamHandler",
    "level": level,
    "formatter": formatter,
    "filters": [f"{tier}_filter"],
    "stream": stream,
  }


def get_logging_config(environment: str | None = None) -> dict[str, Any]:
  """
  Build a dictConfig for the given environment.

  Args:
      environment: prod, staging, test or dev (default: FLIPSIDE_ENVIRONMENT)

  Returns:
      Configuration dictionary for logging.config.dictConfig
  """
  env = environment or EnvConfig.get_environment_key()
  default_level, enable_debug = ENVIRONMENT_LEVELS.get(env, ENVIRONMENT_LEVELS["dev"])

  if env != "test" and EnvConfig.LOG_LEVEL:
    default_level = EnvConfig.LOG_LEVEL.upper()
  formatter = "structured" if EnvConfig.LOG_JSON else "simple"

  if env == "dev":
    handlers = {
      "console": {
        "class": "logging.StreamHandler",
        "level": default_level,
        "formatter": "simple",
        "stream": "ext://sys.stdout",
      }
    }
  else:
    handlers = {
      "critical": _tier_handler("critical", "ERROR", formatter, "ext://sys.stderr"),
      "operational": _tier_handler(
        "operational", "INFO", formatter, "ext://sys.stdout"
      ),
    }
    if enable_debug:
      handlers["debug"] = _tier_handler("debug", "DEBUG", formatter, "ext://sys.stdout")

  loggers: dict[str, Any] = {
    name: {"level": default_level, "handlers": list(handlers), "propagate": False}
    for name in APP_LOGGERS
  }
  # httpx logs every request at INFO
  loggers["httpx"] = {"level": "WARNING"}
  loggers["httpcore"] = {"level": "WARNING"}

  return {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
      "structured": {"()": StructuredFormatter},
      "simple": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
    },
    "filters": {
      f"{tier}_filter": {"()": TieredLogFilter, "tier": tier} for tier in LOG_TIERS
    },
    "handlers": handlers,
    "loggers": loggers,
  }


def setup_logging(environment: str | None = None) -> None:
  """Apply the logging configuration for the current environment."""
  logging.config.dictConfig(get_logging_config(environment))


def get_logger(name: str) -> logging.Logger:
  return logging.getLogger(name)


def log_rpc_call(
  logger: logging.Logger,
  method: str,
  duration_ms: float,
  success: bool = True,
  status_code: int | None = None,
  request_id: str | None = None,
  error: str | None = None,
) -> None:
  """Log a completed JSON-RPC call with its round-trip time."""
  extra: dict[str, Any] = {
    "component": "rpc",
    "action": "call_completed" if success else "call_failed",
    "rpc_method": method,
    "duration_ms": round(duration_ms, 2),
    "request_id": request_id,
  }
  if status_code is not None:
    extra["status_code"] = status_code

  if success:
    logger.debug(f"{method} ({duration_ms:.2f}ms)", extra=extra)
  else:
    extra["metadata"] = {"error": error}
    logger.warning(f"{method} failed ({duration_ms:.2f}ms): {error}", extra=extra)


def log_query_run_event(
  logger: logging.Logger,
  action: str,
  query_run_id: str,
  state: str | None = None,
  level: int = logging.INFO,
  metadata: dict[str, Any] | None = None,
) -> None:
  """Log a query-run lifecycle event (submitted, polled, redirected, finished)."""
  message = f"Query run {query_run_id}: {action}"
  if state:
    message += f" [{state}]"

  logger.log(
    level,
    message,
    extra={
      "component": "query_run",
      "action": action,
      "query_run_id": query_run_id,
      "state": state,
      "metadata": metadata or {},
    },
  )
