"""Configuration schemas for the query engine."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

DEFAULT_ACCEPT = (
    "text/turtle, application/n-triples;q=0.9, application/n-quads;q=0.9, "
    "application/trig;q=0.9, application/ld+json;q=0.8, "
    "application/rdf+xml;q=0.7, text/n3;q=0.6, */*;q=0.1"
)


@dataclass
class FetchConfig:
    """Configuration for fetching source documents."""

    timeout: int = 30
    accept: str = DEFAULT_ACCEPT
    user_agent: str = "rdflib-query-engine"

    # Used when neither the content type nor the file extension names a format
    default_format: Literal[
        "turtle", "nt", "nquads", "trig", "xml", "n3", "json-ld"
    ] = "turtle"


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: str | Path | None = None
    max_file_size: str = "10MB"
    backup_count: int = 5


@dataclass
class EngineConfig:
    """
    Main engine configuration.

    The engine only reads ``fetch``. The embedding application applies
    ``logging`` by passing it to :func:`rdflib_query_engine.utils.setup_logging`.
    """

    fetch: FetchConfig = field(default_factory=FetchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
