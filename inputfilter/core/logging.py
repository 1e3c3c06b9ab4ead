"""Structured Logging

Engine and factory events go through structlog onto stdlib loggers under
``inputfilter``. Nothing is configured on import and a NullHandler keeps
those loggers silent: applications call configure_logging() once (levels
and format come from Settings unless given) to see them.

Payload values can end up in events (unknown keys, raw values), so keys that
look like credentials are redacted before rendering.
"""
import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.types import EventDict, Processor


SENSITIVE_KEYS = frozenset({"password", "password_confirm", "token", "secret", "authorization", "cookie", "api_key"})
REDACTED = "[REDACTED]"

logging.getLogger("inputfilter").addHandler(logging.NullHandler())


def _redact(obj: Any, depth: int = 0) -> Any:
    if depth > 5:
        return obj
    if isinstance(obj, dict):
        return {k: REDACTED if str(k).lower() in SENSITIVE_KEYS else _redact(v, depth + 1) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_redact(item, depth + 1) for item in obj]
    return obj


def redact_sensitive_keys(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace values under credential-like keys, at any nesting depth."""
    return _redact(event_dict)


def tag_service(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", "inputfilter")
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors used in both console and JSON configurations."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        tag_service,
        redact_sensitive_keys,
    ]


def _renderer(json_logs: bool) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)


def configure_logging(level: str | None = None, json_logs: bool | None = None, stream: TextIO | None = None) -> None:
    """Route structlog and stdlib logging through one handler.

    Args:
        level: Log level name; defaults to ``settings.LOG_LEVEL``
        json_logs: JSON lines instead of colored console output; defaults to ``settings.LOG_JSON``
        stream: Output stream, stdout by default
    """
    from inputfilter.core.config import settings

    level = level or settings.LOG_LEVEL
    json_logs = settings.LOG_JSON if json_logs is None else json_logs
    shared_processors = get_shared_processors()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, _renderer(json_logs)],
    ))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """structlog logger writing to the stdlib logger ``name``, whatever structlog's logger factory."""
    return structlog.wrap_logger(logging.getLogger(name))


def bind_context(**kwargs) -> None:
    """Bind key-value pairs to the current logging context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


class LoggerRegistry:
    """One named logger per engine area, created lazily under the ``inputfilter.`` prefix."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, name: str) -> structlog.stdlib.BoundLogger:
        if name not in cls._loggers:
            cls._loggers[name] = get_logger(f"inputfilter.{name}")
        return cls._loggers[name]


def engine_logger() -> structlog.stdlib.BoundLogger:
    """Logger for validation engine events."""
    return LoggerRegistry.get("engine")


def factory_logger() -> structlog.stdlib.BoundLogger:
    """Logger for factory/spec construction events."""
    return LoggerRegistry.get("factory")
