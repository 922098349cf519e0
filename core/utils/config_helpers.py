"""Helper utilities for configuration modules."""

from __future__ import annotations

from core.exceptions import ConfigurationError

from .env import get_env

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def parse_bool(raw: str | None, *, default: bool = False) -> bool:
    """Interpret common truthy/falsy spellings; ``None`` yields ``default``."""

    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return default


def env_int(key: str, default: int, *, minimum: int | None = None) -> int:
    """Read an integer setting, raising :class:`ConfigurationError` on junk."""

    raw = get_env(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}", key=key) from exc
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"{key} must be >= {minimum}, got {value}", key=key)
    return value


def env_float(key: str, default: float) -> float:
    raw = get_env(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}", key=key) from exc


__all__ = ["env_float", "env_int", "parse_bool"]
