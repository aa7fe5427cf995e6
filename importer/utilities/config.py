"""Importer configuration: config.json, environment overrides and pipeline assembly."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from importer.errors import ConfigurationError
from importer.orchestrator.driver import ImporterPipeline
from importer.utilities.config_validator import SECTION, validate_importer_config

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config.json"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "filter_policy": "all",
    "on_error": "reject",
    "split_policy": "continue",
    "workers": 1,
    "handlers": [],
}

DEFAULT_TASK_TIMEOUT = 600
DEFAULT_MIN_FREE_MEMORY_MB = 512


def get_config_path(path: Optional[str] = None) -> Path:
    return Path(path or os.getenv("IMPORTER_CONFIG") or DEFAULT_CONFIG_PATH)


def load_importer_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the configuration JSON.

    Args:
        path: Config file; defaults to $IMPORTER_CONFIG, then config.json at
            the repository root

    Returns:
        The raw configuration dict. A missing file yields the default
        (empty) importer section.
    """
    config_path = get_config_path(path)
    if not config_path.exists():
        logger.warning("Config file %s not found. Using defaults.", config_path)
        return {SECTION: dict(DEFAULT_SETTINGS)}

    try:
        with open(config_path, encoding="utf-8") as handle:
            config = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {config_path}: {exc}") from exc
    logger.info("Loaded importer configuration from %s", config_path)
    return config


def get_importer_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    """Return the importer section with defaults filled in."""
    settings = dict(DEFAULT_SETTINGS)
    settings.update(config.get(SECTION) or {})
    return settings


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def get_workers(config: Dict[str, Any]) -> int:
    """Worker count: $IMPORTER_WORKERS overrides the configured value."""
    return _env_int("IMPORTER_WORKERS", get_importer_settings(config)["workers"])


def get_task_timeout() -> int:
    return _env_int("IMPORTER_TASK_TIMEOUT", DEFAULT_TASK_TIMEOUT)


def get_min_free_memory_mb() -> int:
    return _env_int("IMPORTER_MIN_FREE_MEMORY_MB", DEFAULT_MIN_FREE_MEMORY_MB)


def build_pipeline(config: Optional[Dict[str, Any]] = None) -> ImporterPipeline:
    """
    Validate the configuration and assemble the pipeline.

    Raises:
        ConfigurationError: with every validation message when invalid
    """
    if config is None:
        config = load_importer_config()
    errors = validate_importer_config(config)
    if errors:
        raise ConfigurationError("Invalid importer configuration: " + "; ".join(errors))
    return ImporterPipeline.from_config(get_importer_settings(config))
