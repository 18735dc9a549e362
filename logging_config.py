from __future__ import annotations

import logging
import time
from logging.config import dictConfig
from typing import TYPE_CHECKING, Any, Iterable, Sequence

from settings import get_settings

if TYPE_CHECKING:
    from models.identity import DeviceIdentity

_DEFAULT_EXTRA_KEYS = (
    "topic",
    "device_class",
    "instance_id",
    "value",
    "payload",
    "reason",
    "source",
    "outcome",
)

_configured = False


class ContextualFormatter(logging.Formatter):
    """Append ``key=value`` pairs for known ``extra=`` fields to each line."""

    converter = time.gmtime

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        extra_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._extra_keys: Sequence[str] = tuple(extra_keys or _DEFAULT_EXTRA_KEYS)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context_parts = [
            f"{key}={getattr(record, key)!r}"
            for key in self._extra_keys
            if getattr(record, key, None) is not None
        ]
        if context_parts:
            return f"{message} | {' '.join(context_parts)}"
        return message


def identity_context(identity: "DeviceIdentity", **extra: Any) -> dict[str, Any]:
    """Build the ``extra=`` mapping for a log line about one device."""
    context: dict[str, Any] = {
        "device_class": identity.device_class,
        "instance_id": identity.instance_id,
    }
    context.update(extra)
    return context


_LINE_FORMAT = "%(asctime)sZ | %(levelname)s | %(name)s | %(message)s"
_HANDLER = "console"


def _logger_entry(level: str | int) -> dict[str, Any]:
    return {"handlers": [_HANDLER], "level": level, "propagate": False}


def build_logging_config(level: str | int) -> dict[str, Any]:
    """dictConfig schema routing the app and uvicorn through one console handler."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "contextual": {
                "()": ContextualFormatter,
                "fmt": _LINE_FORMAT,
                "datefmt": "%Y-%m-%dT%H:%M:%S",
            }
        },
        "handlers": {
            _HANDLER: {"class": "logging.StreamHandler", "formatter": "contextual", "level": level},
        },
        # uvicorn installs its own handlers unless its loggers are claimed here
        "loggers": {
            "uvicorn": _logger_entry(level),
            "uvicorn.access": _logger_entry("WARNING"),
        },
        "root": {"handlers": [_HANDLER], "level": level},
    }


def configure_logging(level: str | int | None = None) -> None:
    """Configure application-wide logging with contextual formatting."""
    global _configured
    if _configured:
        return
    dictConfig(build_logging_config(level if level is not None else get_settings().log_level))
    _configured = True
