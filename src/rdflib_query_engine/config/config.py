"""Configuration loading utilities."""

from collections.abc import Callable
import json
import logging
from pathlib import Path
from typing import IO, Any

from dacite import Config, from_dict
import yaml

from .schemas import EngineConfig

logger = logging.getLogger(__name__)

_READERS: dict[str, Callable[[IO[str]], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.load,
}


def load_config(config_path: str | Path) -> EngineConfig:
    """Load engine configuration from a YAML or JSON file.

    Keys that are left out keep their defaults; unknown keys are rejected.

    Args:
        config_path: Path to the configuration file

    Returns:
        EngineConfig: Parsed configuration

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the format is unknown or the content does not match the schema
    """
    config_path = Path(config_path)
    reader = _READERS.get(config_path.suffix.lower())

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    if reader is None:
        raise ValueError(f"Unsupported configuration format: {config_path.suffix}")

    with open(config_path, encoding="utf-8") as f:
        # An empty YAML document yields None
        config_data = reader(f) or {}

    try:
        config = from_dict(
            data_class=EngineConfig, data=config_data, config=Config(strict=True)
        )
    except Exception as e:
        raise ValueError(f"Failed to parse configuration: {e}") from e

    logger.debug(f"Loaded configuration from {config_path}")
    return config
