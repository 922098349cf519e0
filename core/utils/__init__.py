"""Utility helpers shared across core packages.

Kept limited to environment parsing so configuration modules can import it
without pulling in feature code.
"""

from .config_helpers import env_float, env_int, parse_bool
from .env import get_env, get_node_env, is_production, is_test

__all__ = [
    "env_float",
    "env_int",
    "get_env",
    "get_node_env",
    "is_production",
    "is_test",
    "parse_bool",
]
