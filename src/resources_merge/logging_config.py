from __future__ import annotations

import contextvars
import json
import logging
import time
from typing import Any

_CONFIGURED = False

# Context variables for structured logging
_log_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "log_context", default=None
)


def get_log_context() -> dict[str, Any]:
    """Get the current logging context."""
    ctx = _log_context.get()
    return ctx.copy() if ctx else {}


def set_log_context(**kwargs: Any) -> None:
    """Set the current logging context (replaces existing)."""
    _log_context.set(dict(kwargs))


def update_log_context(**kwargs: Any) -> None:
    """Update the current logging context (merges with existing)."""
    current = get_log_context()
    current.update(kwargs)
    _log_context.set(current)


def clear_log_context() -> None:
    """Clear the current logging context."""
    _log_context.set({})


# Attributes set on records via ``extra=error.as_log_fields()``
ERROR_FIELDS = ("error_code", "error_message", "error_context")


def _error_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {key: getattr(record, key) for key in ERROR_FIELDS if hasattr(record, key)}


class LogContext:
    """Context manager for temporary log context."""

    def __init__(self, **kwargs: Any):
        self.kwargs = kwargs
        self.token: contextvars.Token | None = None

    def __enter__(self) -> LogContext:
        current = get_log_context()
        current.update(self.kwargs)
        self.token = _log_context.set(current)
        return self

    def __exit__(self, *args: Any) -> None:
        if self.token is not None:
            _log_context.reset(self.token)


class TextFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        self.converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        context = get_log_context()
        if context:
            fields = " ".join(f"{key}={value}" for key, value in sorted(context.items()))
            formatted = f"{formatted} | {fields}"
        error = _error_fields(record)
        if error:
            fields = " ".join(f"{key}={value}" for key, value in error.items())
            formatted = f"{formatted} | {fields}"
        return formatted


class JsonFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__()
        self.converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Include structured context
        context = get_log_context()
        if context:
            payload["context"] = context
        payload.update(_error_fields(record))

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _resolve_level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    if level is None:
        return logging.INFO
    return logging._nameToLevel.get(str(level).upper(), logging.INFO)


def configure_logging(*, level: str | int | None = None, fmt: str = "text") -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return

    root = logging.getLogger()
    root.setLevel(_resolve_level(level))

    if not root.handlers:
        handler = logging.StreamHandler()
        if fmt.lower() == "json":
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(TextFormatter())
        root.addHandler(handler)

    _CONFIGURED = True


def add_logging_args(parser: Any) -> None:
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        default="text",
        choices=["text", "json"],
        help="Logging format (default: text)",
    )
