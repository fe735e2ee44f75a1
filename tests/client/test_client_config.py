"""Tests for RPC client configuration."""

import os
from unittest.mock import patch

from flipside.client.config import RpcClientConfig


class TestRpcClientConfig:
  """Test cases for RpcClientConfig."""

  def test_default_configuration(self):
    config = RpcClientConfig()

    assert config.base_url == ""
    assert config.timeout == 30.0
    assert config.max_connections == 100
    assert config.max_keepalive_connections == 20
    assert config.keepalive_expiry == 5.0
    assert config.headers == {}
    assert config.verify_ssl is True

  def test_from_env_with_defaults(self):
    with patch.dict(os.environ, {}, clear=True):
      config = RpcClientConfig.from_env()

      assert config.base_url == ""
      assert config.timeout == 30.0

  def test_from_env_with_all_values(self):
    env_vars = {
      "FLIPSIDE_CLIENT_BASE_URL": "https://rpc.example.com/json-rpc",
      "FLIPSIDE_CLIENT_TIMEOUT": "12.5",
      "FLIPSIDE_CLIENT_MAX_CONNECTIONS": "10",
      "FLIPSIDE_CLIENT_MAX_KEEPALIVE_CONNECTIONS": "2",
      "FLIPSIDE_CLIENT_KEEPALIVE_EXPIRY": "1.5",
      "FLIPSIDE_CLIENT_VERIFY_SSL": "false",
    }

    with patch.dict(os.environ, env_vars, clear=True):
      config = RpcClientConfig.from_env()

      assert config.base_url == "https://rpc.example.com/json-rpc"
      assert config.timeout == 12.5
      assert config.max_connections == 10
      assert config.max_keepalive_connections == 2
      assert config.keepalive_expiry == 1.5
      assert config.verify_ssl is False

  def test_from_env_custom_prefix(self):
    with patch.dict(os.environ, {"CUSTOM_TIMEOUT": "5"}, clear=True):
      config = RpcClientConfig.from_env(prefix="CUSTOM_")

      assert config.timeout == 5.0

  def test_with_overrides(self):
    original = RpcClientConfig(
      base_url="https://rpc.example.com", headers={"X-Original": "1"}
    )

    updated = original.with_overrides(timeout=60.0, verify_ssl=False)

    assert updated.timeout == 60.0
    assert updated.verify_ssl is False
    assert updated.base_url == "https://rpc.example.com"
    assert original.timeout == 30.0
    assert original.verify_ssl is True

  def test_with_overrides_copies_headers(self):
    original = RpcClientConfig(headers={"X-Original": "1"})

    updated = original.with_overrides()
    updated.headers["X-New"] = "2"

    assert original.headers == {"X-Original": "1"}
