"""Runtime configuration: settings from the environment and structlog setup.

Usage:
    from barter.config import get_settings, setup_logging
    settings = get_settings()
    setup_logging()
"""

from .logging import (
    bind_request_context,
    bind_task_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "bind_request_context",
    "bind_task_context",
    "clear_request_context",
]
