"""Configuration management for the query engine."""

from .config import load_config
from .schemas import EngineConfig, FetchConfig, LoggingConfig

__all__ = [
    "EngineConfig",
    "FetchConfig",
    "LoggingConfig",
    "load_config",
]
