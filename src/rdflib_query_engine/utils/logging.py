"""Logging utilities for applications embedding the query engine."""

import logging
import logging.handlers
from pathlib import Path
import re
import sys

from ..config.schemas import LoggingConfig

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

# Loggers owned by this package: module loggers and document providers
PACKAGE_LOGGERS = ("rdflib_query_engine", "provider")

EXTERNAL_LOGGERS = ("urllib3", "requests", "rdflib")

_SIZE_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)\s*([KMGT]?B)?$")
_SIZE_UNITS = {"B": 1, "KB": 1024, "MB": 1024**2, "GB": 1024**3, "TB": 1024**4}


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """
    Route log records of the engine to stdout and, optionally, a rotating file.

    Existing handlers of the root logger are replaced.

    Args:
        config: Logging configuration

    Returns:
        logging.Logger: Configured root logger
    """
    config = config or LoggingConfig()
    level = getattr(logging, config.level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format)
    for handler in _build_handlers(config):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in PACKAGE_LOGGERS:
        logging.getLogger(name).setLevel(level)

    return root_logger


def _build_handlers(config: LoggingConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if config.file_path:
        log_file = Path(config.file_path)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                filename=log_file,
                maxBytes=parse_file_size(config.max_file_size),
                backupCount=config.backup_count,
                encoding="utf-8",
            )
        )

    return handlers


def parse_file_size(size_str: str) -> int:
    """
    Convert a size such as "10MB", "1.5 GB" or "2048" to bytes.

    Anything unparseable gives 10MB.
    """
    match = _SIZE_PATTERN.match((size_str or "").strip().upper())
    if match is None:
        return DEFAULT_MAX_FILE_SIZE

    number, unit = match.groups()
    return int(float(number) * _SIZE_UNITS[unit or "B"])


def configure_external_loggers(level: str | int = logging.WARNING) -> None:
    """Quiet the HTTP and RDF libraries the engine relies on."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    for name in EXTERNAL_LOGGERS:
        logging.getLogger(name).setLevel(level)
