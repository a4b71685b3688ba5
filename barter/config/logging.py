"""Structured logging for the API and the Celery workers.

Both processes log through the standard library (``logging.getLogger``) and
structlog renders every record, so events emitted with ``extra={...}`` by the
domain and application layers end up as flat key/value pairs.

Usage:
    from barter.config.logging import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__)
    logger.info("trade.accepted", trade_id=42)
"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import structlog
from structlog.typing import EventDict

from .settings import get_settings

SERVICE_NAME = "barter-trade-engine"
SERVICE_VERSION = "2.0.0"

# Keys never written to the log, at any nesting depth
REDACTED_KEYS = frozenset({
    "password",
    "secret",
    "secret_key",
    "token",
    "access_token",
    "authorization",
})

# Loggers that are too chatty at INFO
QUIET_LOGGERS = ("uvicorn.access", "aiosqlite", "celery.app.trace")


# ============================================================================
# PROCESSORS
# ============================================================================


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: "[REDACTED]" if key.lower() in REDACTED_KEYS else _redact(inner)
            for key, inner in value.items()
        }
    return value


def redact_secrets(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Mask credentials (JWTs, the signing key) before rendering."""
    for key in list(event_dict):
        if key.lower() in REDACTED_KEYS:
            event_dict[key] = "[REDACTED]"
        else:
            event_dict[key] = _redact(event_dict[key])
    return event_dict


def stringify_decimals(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Render prices, ratios and totals as plain strings.

    The JSON renderer would otherwise fall back to ``repr`` and emit
    ``"Decimal('1.50')"``.
    """
    for key, value in event_dict.items():
        if isinstance(value, Decimal):
            event_dict[key] = str(value)
        elif isinstance(value, (list, tuple)) and any(isinstance(v, Decimal) for v in value):
            event_dict[key] = [str(v) if isinstance(v, Decimal) else v for v in value]
    return event_dict


def add_timestamp(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_service_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    event_dict["service"] = SERVICE_NAME
    event_dict["environment"] = get_settings().environment
    event_dict["version"] = SERVICE_VERSION
    return event_dict


# ============================================================================
# SETUP
# ============================================================================


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.stdlib.ExtraAdder(),
        add_timestamp,
        add_service_context,
        redact_secrets,
        stringify_decimals,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging() -> None:
    """Route structlog and stdlib logging through one stdout handler.

    Called by main.py at import time and by every Celery worker process.
    ``settings.log_format`` picks JSON lines or a colored console renderer.
    """
    settings = get_settings()
    shared = _shared_processors()

    if settings.log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        shared.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared)
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, settings.log_level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if settings.db_echo else logging.WARNING
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger (``name`` is typically ``__name__``)."""
    return structlog.get_logger(name)


# ============================================================================
# CONTEXT BINDING
# ============================================================================


def bind_request_context(
    request_id: str,
    user_id: int | None = None,
    **extra: Any,
) -> None:
    """Bind the correlation id (and caller) to every log line of a request.

    Args:
        request_id: Value of X-Request-ID, generated when the client sent none.
        user_id: Authenticated user, when known.
        **extra: Additional context (method, path).
    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, user_id=user_id, **extra)


def bind_task_context(task_name: str, task_id: str | None = None, **extra: Any) -> None:
    """Same as bind_request_context, for one Celery task run."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(task=task_name, task_id=task_id, **extra)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
