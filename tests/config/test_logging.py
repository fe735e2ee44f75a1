import json
import logging
import sys

import pytest

from flipside.config.env import EnvConfig
from flipside.config.logging import (
  APP_LOGGERS,
  StructuredFormatter,
  TieredLogFilter,
  get_logger,
  get_logging_config,
  log_query_run_event,
  log_rpc_call,
)


@pytest.fixture(autouse=True)
def default_env(monkeypatch):
  monkeypatch.setattr(EnvConfig, "LOG_LEVEL", "")
  monkeypatch.setattr(EnvConfig, "LOG_JSON", True)


def _make_record(level: int) -> logging.LogRecord:
  return logging.LogRecord(
    name="test",
    level=level,
    pathname=__file__,
    lineno=0,
    msg="message",
    args=(),
    exc_info=None,
  )


def test_structured_formatter_includes_optional_fields():
  formatter = StructuredFormatter()
  record = logging.LogRecord(
    name="flipside.test",
    level=logging.INFO,
    pathname=__file__,
    lineno=10,
    msg="Test %s",
    args=("message",),
    exc_info=None,
  )
  record.component = "rpc"
  record.action = "call_completed"
  record.rpc_method = "getQueryRun"
  record.query_run_id = "run-1"
  record.state = "QUERY_STATE_RUNNING"
  record.duration_ms = 42.5
  record.status_code = 200
  record.metadata = {"key": "value"}
  record.request_id = "req-123"

  payload = json.loads(formatter.format(record))

  assert payload["message"] == "Test message"
  assert payload["component"] == "rpc"
  assert payload["action"] == "call_completed"
  assert payload["rpc_method"] == "getQueryRun"
  assert payload["query_run_id"] == "run-1"
  assert payload["state"] == "QUERY_STATE_RUNNING"
  assert payload["duration_ms"] == 42.5
  assert payload["status_code"] == 200
  assert payload["metadata"] == {"key": "value"}
  assert payload["request_id"] == "req-123"
  assert payload["timestamp"].endswith("Z")


def test_structured_formatter_includes_error_details():
  formatter = StructuredFormatter()
  try:
    raise RuntimeError("boom")
  except RuntimeError:
    record = logging.LogRecord(
      name="flipside",
      level=logging.ERROR,
      pathname=__file__,
      lineno=1,
      msg="failed",
      args=(),
      exc_info=sys.exc_info(),
    )
  record.error_category = "rpc"

  payload = json.loads(formatter.format(record))

  assert payload["error"]["type"] == "RuntimeError"
  assert payload["error"]["message"] == "boom"
  assert payload["error_category"] == "rpc"


@pytest.mark.parametrize(
  "tier,level,expected",
  [
    ("critical", logging.ERROR, True),
    ("critical", logging.INFO, False),
    ("operational", logging.WARNING, True),
    ("operational", logging.ERROR, False),
    ("debug", logging.DEBUG, True),
    ("debug", logging.INFO, False),
    ("other", logging.DEBUG, True),
  ],
)
def test_tiered_log_filter(tier, level, expected):
  assert TieredLogFilter(tier).filter(_make_record(level)) is expected


def test_logging_config_prod():
  config = get_logging_config("prod")

  for name in APP_LOGGERS:
    assert config["loggers"][name]["level"] == "INFO"
    assert config["loggers"][name]["handlers"] == ["critical", "operational"]
  assert "debug" not in config["handlers"]
  assert "root" not in config


def test_logging_config_staging_adds_debug_handler():
  config = get_logging_config("staging")

  assert "debug" in config["handlers"]
  for name in APP_LOGGERS:
    assert "debug" in config["loggers"][name]["handlers"]


def test_logging_config_test_is_quiet():
  config = get_logging_config("test")

  assert config["loggers"]["flipside"]["level"] == "WARNING"


def test_logging_config_dev_uses_console():
  config = get_logging_config("dev")

  assert config["loggers"]["flipside"]["handlers"] == ["console"]
  assert config["handlers"]["console"]["formatter"] == "simple"


def test_log_rpc_call_success(caplog):
  logger = get_logger("tests.logging.rpc")

  with caplog.at_level(logging.DEBUG, logger="tests.logging.rpc"):
    log_rpc_call(logger, "getQueryRun", 12.5, status_code=200, request_id="abc")

  record = caplog.records[-1]
  assert record.levelno == logging.DEBUG
  assert record.action == "call_completed"
  assert record.rpc_method == "getQueryRun"
  assert record.status_code == 200


def test_log_rpc_call_failure(caplog):
  logger = get_logger("tests.logging.rpc_failure")

  with caplog.at_level(logging.DEBUG, logger="tests.logging.rpc_failure"):
    log_rpc_call(logger, "createQueryRun", 5.0, success=False, error="refused")

  record = caplog.records[-1]
  assert record.levelno == logging.WARNING
  assert record.action == "call_failed"
  assert record.metadata == {"error": "refused"}
  assert not hasattr(record, "status_code")


def test_log_query_run_event(caplog):
  logger = get_logger("tests.logging.query_run")

  with caplog.at_level(logging.INFO, logger="tests.logging.query_run"):
    log_query_run_event(
      logger, "finished", "run-9", state="QUERY_STATE_SUCCESS", metadata={"a": 1}
    )

  record = caplog.records[-1]
  assert record.getMessage() == "Query run run-9: finished [QUERY_STATE_SUCCESS]"
  assert record.query_run_id == "run-9"
  assert record.metadata == {"a": 1}


def test_logging_config_level_override(monkeypatch):
  monkeypatch.setattr(EnvConfig, "LOG_LEVEL", "debug")

  assert get_logging_config("prod")["loggers"]["flipside"]["level"] == "DEBUG"
  assert get_logging_config("test")["loggers"]["flipside"]["level"] == "WARNING"


def test_logging_config_plain_text(monkeypatch):
  monkeypatch.setattr(EnvConfig, "LOG_JSON", False)

  config = get_logging_config("prod")

  assert config["handlers"]["operational"]["formatter"] == "simple"


def test_logging_config_quiets_httpx():
  config = get_logging_config("prod")

  assert config["loggers"]["httpx"] == {"level": "WARNING"}


def test_structured_formatter_skips_missing_context():
  payload = json.loads(StructuredFormatter().format(_make_record(logging.INFO)))

  assert set(payload) == {"timestamp", "level", "component", "message"}
  assert payload["component"] == "test"


def test_package_logger_is_not_configured_on_import():
  from flipside.logger import logger

  assert logger is logging.getLogger("flipside")
  assert logger.propagate
  assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)
  assert not any(isinstance(h, logging.StreamHandler) for h in logger.handlers)


def test_package_records_reach_host_handlers(caplog):
  from flipside.logger import logger, rpc_logger

  with caplog.at_level(logging.DEBUG, logger="flipside"):
    log_query_run_event(logger, "submitted", "run-1", state="QUERY_STATE_READY")
    log_rpc_call(rpc_logger, "getQueryRun", 3.0, status_code=200)

  actions = [r.action for r in caplog.records if r.name.startswith("flipside")]
  assert actions == ["submitted", "call_completed"]
