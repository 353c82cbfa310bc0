"""Configuration for thread-focus

Settings are read from .thread-focus.yaml in the current directory or the
home directory, falling back to defaults. Secrets such as SLACK_API_TOKEN
come from the environment (see cli.py, which calls load_dotenv()).
"""

import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .models import DEFAULT_PENDING_PREFIX, DEFAULT_TOMBSTONE_SUFFIX

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".thread-focus.yaml"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ThreadFocusConfig(BaseModel):
    """Tunable settings for assembly, pagination and rendering"""

    debounce_seconds: float = Field(default=0.3, ge=0)
    tombstone_suffix: str = DEFAULT_TOMBSTONE_SUFFIX
    pending_prefix: str = DEFAULT_PENDING_PREFIX
    assembler_cache_size: int = Field(default=32, ge=0)
    placeholder_limit: int = Field(default=20, ge=0)
    slack_page_size: int = Field(default=200, ge=1, le=1000)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


def config_search_paths() -> List[Path]:
    return [
        Path(CONFIG_FILENAME),
        Path.home() / CONFIG_FILENAME,
    ]


def load_config(path: Optional[Path] = None) -> ThreadFocusConfig:
    """Load settings from YAML or fall back to defaults

    Args:
        path: Explicit config file. When given it must exist and parse.

    Returns:
        ThreadFocusConfig. Settings may sit at the top level of the file or
        under a ``thread_focus:`` section.
    """
    if path is not None:
        return _parse_config(Path(path))

    for config_path in config_search_paths():
        if config_path.exists():
            try:
                config = _parse_config(config_path)
                logger.debug(f"Loaded config from {config_path}")
                return config
            except (OSError, yaml.YAMLError, ValueError) as e:
                logger.warning(f"Failed to load {config_path}: {e}")
                continue

    return ThreadFocusConfig()


def _parse_config(config_path: Path) -> ThreadFocusConfig:
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    section = data.get("thread_focus", data)
    if not isinstance(section, dict):
        raise ValueError(f"'thread_focus' section in {config_path} must be a mapping")

    return ThreadFocusConfig(**section)


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging in the project's format"""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
