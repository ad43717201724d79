"""Logging configuration for harbourmaster.

The library only emits events through ``structlog``; applications and test
suites that want formatted output call ``setup_logging()`` themselves.
"""

# Standard library imports
import logging
import sys
from typing import Optional

# Third-party imports
import structlog

# Local application imports
from .._version import __version__
from ..config import settings


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure structured logging over the standard library."""
    level = (level or settings.log_level).upper()
    log_format = (log_format or settings.log_format).lower()

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        add_library_context,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    configure_third_party_loggers()


def configure_third_party_loggers() -> None:
    """Reduce noise from the Docker SDK and its HTTP stack."""
    logging.getLogger("docker").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def add_library_context(logger, method_name, event_dict):
    """Add library name and version to log entries."""
    event_dict["library"] = "harbourmaster"
    event_dict["version"] = __version__
    return event_dict


def get_logger(name: str = None) -> structlog.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)
