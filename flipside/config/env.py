"""
Environment variable configuration.

Everything the client reads from the process environment, resolved once at
import time.
"""

import os

from .constants import API_BASE_URL

ENVIRONMENT_ALIASES = {
  "prod": "prod",
  "production": "prod",
  "staging": "staging",
  "stage": "staging",
  "test": "test",
  "testing": "test",
}


def get_str_env(key: str, default: str = "") -> str:
  """Get a string environment variable, treating blank values as unset."""
  value = os.getenv(key, "").strip()
  return value or default


def get_bool_env(key: str, default: bool = False) -> bool:
  """Get a boolean environment variable (true/1/yes/on)."""
  value = os.getenv(key)
  if value is None:
    return default
  return value.strip().lower() in ("true", "1", "yes", "on")


class EnvConfig:
  """Settings read from FLIPSIDE_* environment variables."""

  # Environment and logging
  ENVIRONMENT = get_str_env("FLIPSIDE_ENVIRONMENT", "prod")
  LOG_LEVEL = get_str_env("FLIPSIDE_LOG_LEVEL")
  LOG_JSON = get_bool_env("FLIPSIDE_LOG_JSON", True)

  # Service access
  FLIPSIDE_API_KEY = get_str_env("FLIPSIDE_API_KEY")
  FLIPSIDE_BASE_URL = get_str_env("FLIPSIDE_BASE_URL", API_BASE_URL)

  @classmethod
  def get_environment_key(cls) -> str:
    """
    Normalize ENVIRONMENT for configuration lookups.

    Returns:
        One of 'prod', 'staging', 'test' or 'dev'; unknown names map to 'dev'
    """
    return ENVIRONMENT_ALIASES.get(cls.ENVIRONMENT.lower(), "dev")


env = EnvConfig()
