"""Diagnostic sink and structured logging setup.

The engine reports every non-fatal problem through a DiagnosticSink. The
default sink forwards to structlog; a sink must never abort validation, so
StructlogSink swallows its own failures.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import structlog

from formrules.config import Settings, get_settings
from formrules.models import Severity

logger = structlog.get_logger()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Install the structlog processor chain used by the engine."""
    settings = settings or get_settings()
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if settings.DEBUG else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


class DiagnosticSink(ABC):
    """Accepts leveled diagnostic messages. Implementations must not raise."""

    @abstractmethod
    def log(self, message: str, level: Severity, **context) -> None:
        ...


class StructlogSink(DiagnosticSink):
    """Forwards diagnostics to a structlog logger.

    The message is used as the event name; context becomes key/value pairs.
    """

    def __init__(self, bound_logger=None):
        self._logger = bound_logger or logger

    def log(self, message: str, level: Severity, **context) -> None:
        try:
            method = getattr(self._logger, Severity(level).value)
            method(message, **context)
        except Exception:
            # A broken sink must not break validation
            return
