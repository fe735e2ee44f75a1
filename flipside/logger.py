"""
Flipside client logging.

Exposes the loggers used across the package. Importing this module does not
configure logging: records propagate to the host application's handlers, and
``setup_logging()`` applies the structured per-environment configuration when
called explicitly.
"""

import logging

from .config.logging import (
  setup_logging,
  get_logger,
  log_rpc_call,
  log_query_run_event,
)

logger = get_logger("flipside")
logger.addHandler(logging.NullHandler())

rpc_logger = get_logger("flipside.rpc")

__all__ = [
  "logger",
  "rpc_logger",
  "setup_logging",
  "log_rpc_call",
  "log_query_run_event",
]
