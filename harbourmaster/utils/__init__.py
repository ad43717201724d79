"""Utility helpers for harbourmaster."""

from .error_handlers import handle_docker_error, translate_engine_error
from .id_generator import generate_slug, slugged_name
from .logging import get_logger, setup_logging

__all__ = [
    "handle_docker_error",
    "translate_engine_error",
    "generate_slug",
    "slugged_name",
    "get_logger",
    "setup_logging",
]
