"""Utility modules for the query engine."""

from .logging import configure_external_loggers, parse_file_size, setup_logging

__all__ = [
    "configure_external_loggers",
    "parse_file_size",
    "setup_logging",
]
