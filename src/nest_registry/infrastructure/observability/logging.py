"""Logging setup for the registry service (formatter, filters, dictConfig)."""

from __future__ import annotations

import json
import logging
import os
import traceback
from collections.abc import Mapping
from dataclasses import asdict, is_dataclass
from datetime import UTC, datetime
from logging.config import dictConfig
from typing import Any

from opentelemetry import baggage, trace

_PACKAGE_LOGGER_ROOT = "nest_registry"

# (logger, level env var, default level) for noisy third-party loggers.
_LIBRARY_LOGGERS: tuple[tuple[str, str, str], ...] = (
    ("uvicorn", "UVICORN_LOG_LEVEL", "INFO"),
    ("uvicorn.error", "UVICORN_LOG_LEVEL", "INFO"),
    ("uvicorn.access", "UVICORN_ACCESS_LOG_LEVEL", "WARNING"),
    ("httpx", "HTTPX_LOG_LEVEL", "WARNING"),
    ("httpcore", "HTTPX_LOG_LEVEL", "WARNING"),
)

# Per-call client logs are debug chatter unless explicitly raised.
_PACKAGE_LOGGERS: dict[str, dict[str, Any]] = {
    "nest_registry.content_store.calls": {"level": "WARNING"},
}

_MAX_DEPTH = 8
_MAX_ITEMS = 100


def _env_level(name: str, default: str) -> str:
    return (os.getenv(name) or default).strip().upper()


def json_logs_requested() -> bool:
    """JSON lines when asked for, or when running under a managed container runtime."""
    flag = os.getenv("ENABLE_JSON_LOGS", "").strip().lower()
    if flag in {"1", "true", "yes", "on"}:
        return True
    return bool(os.getenv("K_SERVICE") or os.getenv("KUBERNETES_SERVICE_HOST"))


def _json_safe(value: Any, depth: int = _MAX_DEPTH) -> Any:
    """Coerce ``value`` into something ``json.dumps`` accepts."""
    if depth <= 0:
        return "<depth_exceeded>"
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes len={len(value)}>"
    if isinstance(value, datetime):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return _json_safe(asdict(value), depth - 1)
    if isinstance(value, Mapping):
        items = list(value.items())
        safe = {str(key): _json_safe(item, depth - 1) for key, item in items[:_MAX_ITEMS]}
        if len(items) > _MAX_ITEMS:
            safe["<truncated>"] = len(items) - _MAX_ITEMS
        return safe
    if isinstance(value, (list, tuple, set, frozenset)):
        seq = sorted(value, key=str) if isinstance(value, (set, frozenset)) else list(value)
        safe_seq = [_json_safe(item, depth - 1) for item in seq[:_MAX_ITEMS]]
        if len(seq) > _MAX_ITEMS:
            safe_seq.append(f"<{len(seq) - _MAX_ITEMS} more>")
        return safe_seq
    return str(value)


def _compact(value: Any) -> str:
    return json.dumps(_json_safe(value), sort_keys=True, separators=(",", ":"))


class ExtrasFormatter(logging.Formatter):
    """Render ``extra={"data": ...}`` payloads after the message, or as JSON lines."""

    def __init__(self, *args: Any, json_lines: bool | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._json_lines = json_logs_requested() if json_lines is None else json_lines

    def format(self, record: logging.LogRecord) -> str:
        data = record.__dict__.get("data")
        if self._json_lines:
            return _compact(self._entry(record, data))
        line = super().format(record)
        return f"{line} | data={_compact(data)}" if data else line

    @staticmethod
    def _entry(record: logging.LogRecord, data: Any) -> dict[str, Any]:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        entry: dict[str, Any] = {
            "timestamp": created.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "severity": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if data:
            entry["data"] = data
        otel = record.__dict__.get("otel")
        if otel:
            entry["otel"] = otel
        if record.exc_info:
            entry["exception"] = "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return entry


class OtelContextLogFilter(logging.Filter):
    """Stamp records with the current trace/span ids and any OTel baggage."""

    def filter(self, record: logging.LogRecord) -> bool:
        context: dict[str, Any] = {}
        span = trace.get_current_span().get_span_context()
        if span.is_valid:
            context["trace_id"] = trace.format_trace_id(span.trace_id)
            context["span_id"] = trace.format_span_id(span.span_id)
        entries = baggage.get_all()
        if entries:
            context["baggage"] = {key: str(value) for key, value in entries.items()}
        if context:
            record.__dict__["otel"] = context
        return True


def build_log_config(
    *,
    root_level_env: str = "LOG_LEVEL",
    root_default: str = "INFO",
    extra_loggers: Mapping[str, dict[str, Any]] | None = None,
    json_lines: bool | None = None,
) -> dict[str, Any]:
    """Return a dictConfig-compatible logging configuration."""
    loggers: dict[str, dict[str, Any]] = {
        name: {"level": _env_level(env, default), "handlers": ["console"], "propagate": False}
        for name, env, default in _LIBRARY_LOGGERS
    }
    loggers.update({name: dict(config) for name, config in _PACKAGE_LOGGERS.items()})
    loggers.update(extra_loggers or {})

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "()": ExtrasFormatter,
                "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
                "datefmt": "%Y-%m-%dT%H:%M:%S",
                "json_lines": json_lines,
            }
        },
        "filters": {"otel_context": {"()": OtelContextLogFilter}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "console",
                "filters": ["otel_context"],
            }
        },
        "root": {"level": _env_level(root_level_env, root_default), "handlers": ["console"]},
        "loggers": loggers,
    }


def configure_logging(
    *,
    root_level_env: str = "LOG_LEVEL",
    root_default: str = "INFO",
    extra_loggers: Mapping[str, dict[str, Any]] | None = None,
    json_lines: bool | None = None,
) -> None:
    """Apply the registry logging config.

    ``json_lines=None`` defers to ``ENABLE_JSON_LOGS`` and runtime detection.
    Package loggers created before this call (module-level ``getLogger``)
    are reset to inherit from the root unless configured explicitly.
    """
    config = build_log_config(
        root_level_env=root_level_env,
        root_default=root_default,
        extra_loggers=extra_loggers,
        json_lines=json_lines,
    )
    dictConfig(config)
    configured = set(config["loggers"])
    prefix = f"{_PACKAGE_LOGGER_ROOT}."
    for name, entry in list(logging.Logger.manager.loggerDict.items()):
        if isinstance(entry, logging.Logger) and name.startswith(prefix) and name not in configured:
            entry.setLevel(logging.NOTSET)
    logging.getLogger(__name__).debug(
        "logging configured",
        extra={"data": {"root_level": config["root"]["level"], "json_lines": json_lines}},
    )


__all__ = [
    "ExtrasFormatter",
    "OtelContextLogFilter",
    "build_log_config",
    "configure_logging",
    "json_logs_requested",
]
