"""
Configuration package for the Flipside client.

Static defaults live in ``constants``; values read from the environment live in
``env``.
"""

from . import constants
from .env import EnvConfig, env

__all__ = [
  "EnvConfig",
  "constants",
  "env",
]
