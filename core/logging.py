"""Centralised logging configuration for the video orchestration backend."""
from __future__ import annotations

import json
import logging
import logging.config
from pathlib import Path
from typing import Dict

from core.utils.config_helpers import parse_bool
from core.utils.env import get_env

_PATH_TRIM_PREFIXES = ("/app/",)
_ORIGINAL_LOG_RECORD_FACTORY = logging.getLogRecordFactory()
_LOG_RECORD_FACTORY_CONFIGURED = False

_LOGGING_CONFIGURED = False

_QUIET_LIBRARIES = (
    "httpcore",
    "httpcore.http11",
    "httpcore.connection",
    "httpx",
    "h11",
    "multipart",
    "python_multipart",
)


class _ObservabilityFilter(logging.Filter):
    """Append the structured ``observability`` payload to the rendered message."""

    def filter(self, record: logging.LogRecord) -> bool:
        payload = getattr(record, "observability", None)
        record.observability_suffix = (
            " " + json.dumps(payload, default=str, separators=(",", ":")) if payload else ""
        )
        return True


def _resolve_level(value: str | None, default: str) -> str:
    value = (value or "").strip().upper()
    if value and getattr(logging, value, None) is not None:
        return value
    return default


def _install_log_record_factory() -> None:
    """Install a log record factory that exposes trimmed paths."""

    global _LOG_RECORD_FACTORY_CONFIGURED
    if _LOG_RECORD_FACTORY_CONFIGURED:
        return

    def factory(*args, **kwargs):
        record = _ORIGINAL_LOG_RECORD_FACTORY(*args, **kwargs)
        pathname = getattr(record, "pathname", "") or ""
        for prefix in _PATH_TRIM_PREFIXES:
            if pathname.startswith(prefix):
                record.shortpathname = pathname[len(prefix):]
                break
        else:
            record.shortpathname = pathname
        record.observability_suffix = ""
        return record

    logging.setLogRecordFactory(factory)
    _LOG_RECORD_FACTORY_CONFIGURED = True


def setup_logging(force: bool = False) -> None:
    """Configure the root logger with console and optional rotating file output.

    Environment:
        BACKEND_LOG_LEVEL: root level (default ``INFO``)
        BACKEND_LOG_DIR: enables a midnight-rotated file handler when set
        BACKEND_LOG_RETENTION: rotated files to keep (default 7)
        BACKEND_LOG_TIME_MS: include milliseconds in timestamps
    """

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED and not force:
        return

    log_level = _resolve_level(get_env("BACKEND_LOG_LEVEL", default="INFO"), "INFO")
    console_level = _resolve_level(get_env("BACKEND_LOG_CONSOLE_LEVEL"), log_level)

    handlers: Dict[str, object] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": console_level,
            "formatter": "standard",
            "filters": ["observability"],
            "stream": "ext://sys.stdout",
        },
    }
    root_handlers = ["console"]

    log_dir_value = get_env("BACKEND_LOG_DIR")
    if log_dir_value:
        log_dir = Path(log_dir_value)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.TimedRotatingFileHandler",
            "level": _resolve_level(get_env("BACKEND_LOG_FILE_LEVEL"), log_level),
            "formatter": "standard",
            "filters": ["observability"],
            "filename": str(log_dir / (get_env("BACKEND_LOG_FILE", default="backend.log") or "backend.log")),
            "when": "midnight",
            "backupCount": int(get_env("BACKEND_LOG_RETENTION", default="7") or "7"),
            "encoding": "utf-8",
        }
        root_handlers.append("file")

    location_fmt = "%(shortpathname)s:%(lineno)d"
    if parse_bool(get_env("BACKEND_LOG_TIME_MS")):
        fmt = "%(asctime)s.%(msecs)03d %(levelname)s [{location}] - %(message)s%(observability_suffix)s"
    else:
        fmt = "%(asctime)s %(levelname)s [{location}] - %(message)s%(observability_suffix)s"

    config: Dict[str, object] = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "observability": {"()": _ObservabilityFilter},
        },
        "formatters": {
            "standard": {
                "format": fmt.format(location=location_fmt),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "root": {
            "level": log_level,
            "handlers": root_handlers,
        },
        "loggers": {
            "uvicorn.access": {
                "level": _resolve_level(get_env("BACKEND_ACCESS_LOG_LEVEL"), "WARNING"),
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }

    _install_log_record_factory()

    logging.config.dictConfig(config)
    logging.captureWarnings(True)

    # Request bodies and connection chatter are logged by core.http instead
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True


__all__ = ["setup_logging"]
