"""
Configuration validator for the "importer" section of config.json.

Collects every problem instead of stopping at the first one, so that a single
run reports all of them.
"""

import logging
from typing import Any, Dict, List

from importer.errors import ConfigurationError
from importer.handlers.decisions import FilterPolicy
from importer.handlers.registry import HANDLER_CLASSES, build_handler
from importer.orchestrator.driver import FaultPolicy, SplitPolicy

logger = logging.getLogger(__name__)

SECTION = "importer"

_POLICY_VALUES = {
    "filter_policy": [policy.value for policy in FilterPolicy],
    "on_error": [policy.value for policy in FaultPolicy],
    "split_policy": [policy.value for policy in SplitPolicy],
}


def validate_policies(settings: Dict[str, Any]) -> List[str]:
    """
    Validate the policy values of the importer section.

    Args:
        settings: The "importer" section

    Returns:
        List of error messages (empty if valid)
    """
    errors = []
    for key, allowed in _POLICY_VALUES.items():
        if key in settings and settings[key] not in allowed:
            errors.append(f"{SECTION}.{key}: must be one of {allowed}, got {settings[key]!r}")

    workers = settings.get("workers", 1)
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
        errors.append(f"{SECTION}.workers: must be a positive integer, got {workers!r}")
    return errors


def validate_handlers(handler_configs: Any) -> List[str]:
    """Validate each handler entry by building it."""
    if not isinstance(handler_configs, list):
        return [f"{SECTION}.handlers: must be a list, got {type(handler_configs).__name__}"]

    errors = []
    for position, handler_config in enumerate(handler_configs):
        path = f"{SECTION}.handlers[{position}]"
        if not isinstance(handler_config, dict):
            errors.append(f"{path}: must be an object")
            continue
        class_name = handler_config.get("class")
        if class_name not in HANDLER_CLASSES:
            errors.append(
                f"{path}: unknown handler class {class_name!r}. "
                f"Available: {sorted(HANDLER_CLASSES)}"
            )
            continue
        try:
            build_handler(handler_config)
        except ConfigurationError as exc:
            errors.append(f"{path}: {exc}")
    return errors


def validate_importer_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate a full configuration dictionary.

    Args:
        config: Full configuration dictionary (as loaded from config.json)

    Returns:
        List of error messages (empty if valid)
    """
    if not isinstance(config, dict):
        return [f"configuration must be an object, got {type(config).__name__}"]

    settings = config.get(SECTION, {})
    if not isinstance(settings, dict):
        return [f"{SECTION}: must be an object, got {type(settings).__name__}"]

    errors = validate_policies(settings)
    errors.extend(validate_handlers(settings.get("handlers", [])))

    if errors:
        logger.error("Found %d importer configuration error(s):", len(errors))
        for error in errors:
            logger.error("  - %s", error)
    return errors
