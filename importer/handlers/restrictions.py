"""Metadata restrictions deciding whether a handler applies to a document."""

import logging
import re
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from importer.doc.metadata import Metadata
from importer.errors import ConfigurationError

logger = logging.getLogger(__name__)


def compile_pattern(regex: str, flags: int = 0, context: str = "") -> re.Pattern:
    """Compile a configured regex, turning syntax errors into config errors."""
    try:
        return re.compile(regex, flags)
    except (re.error, TypeError) as exc:
        where = f" in {context}" if context else ""
        raise ConfigurationError(f"Invalid regular expression {regex!r}{where}: {exc}") from exc


def config_flag(config: Dict[str, Any], key: str, default: bool, context: str) -> bool:
    """Return a boolean option; only JSON true/false are accepted."""
    value = config.get(key, default)
    if not isinstance(value, bool):
        raise ConfigurationError(f"{context}: '{key}' must be true or false, got {value!r}")
    return value


@dataclass(frozen=True)
class Restriction:
    """A field must hold at least one value matching `regex` (whole value)."""

    field: str
    regex: str
    case_sensitive: bool = False
    pattern: re.Pattern = dataclass_field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.field or not isinstance(self.field, str):
            raise ConfigurationError("Restriction requires a non-empty 'field'")
        if self.regex is None:
            raise ConfigurationError(f"Restriction on '{self.field}' requires a 'regex'")
        flags = 0 if self.case_sensitive else re.IGNORECASE
        pattern = compile_pattern(self.regex, flags, f"restriction on '{self.field}'")
        object.__setattr__(self, "pattern", pattern)

    def matches(self, metadata: Metadata) -> bool:
        return any(self.pattern.fullmatch(value) for value in metadata.get_values(self.field))

    def to_config(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "regex": self.regex,
            "case_sensitive": self.case_sensitive,
        }

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "Restriction":
        if not isinstance(config, dict):
            raise ConfigurationError(f"Restriction must be an object, got {config!r}")
        return cls(
            field=config.get("field"),
            regex=config.get("regex"),
            case_sensitive=config_flag(config, "case_sensitive", False, "restriction"),
        )


def matches(metadata: Metadata, restrictions: Iterable[Restriction]) -> bool:
    """
    Return True when the handler owning these restrictions applies.

    An empty set always matches. Otherwise only one restriction needs to
    match one value of its field.
    """
    restrictions = tuple(restrictions)
    if not restrictions:
        return True
    return any(restriction.matches(metadata) for restriction in restrictions)


def restrictions_from_config(
    configs: Optional[List[Dict[str, Any]]],
) -> Tuple[Restriction, ...]:
    if not configs:
        return ()
    if not isinstance(configs, list):
        raise ConfigurationError("'restrict_to' must be a list of restrictions")
    return tuple(Restriction.from_config(config) for config in configs)
