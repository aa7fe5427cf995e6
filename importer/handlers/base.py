"""
base.py - Abstract base classes for all pipeline handlers.

Handlers come in three capabilities, dispatched by the pipeline driver on
`handler_type`:
- tagger: adds/overwrites metadata (and may replace content)
- filter: returns a FilterDecision, never mutates the document
- splitter: turns one document into an ordered list of child documents

Every handler carries an immutable set of restrictions; the driver only
invokes it when they match the document metadata.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from importer.doc.document import ImporterDocument
from importer.doc.metadata import Metadata
from importer.errors import ConfigurationError
from importer.handlers.decisions import FilterDecision
from importer.handlers.restrictions import (
    Restriction,
    config_flag,
    matches,
    restrictions_from_config,
)

logger = logging.getLogger(__name__)

TAGGER = "tagger"
FILTER = "filter"
SPLITTER = "splitter"


class BaseHandler(ABC):
    """
    Abstract base class for pipeline handlers.

    Subclasses implement:
    - handler_type: tagger, filter or splitter (via the capability classes)
    - _params(): handler-specific configuration, for to_config() and equality
    - from_config(): build from a configuration dict

    Optionally:
    - setup(): one-time initialization of collaborators
    - teardown(): release them
    """

    name: str = "BaseHandler"
    handler_type: str = "unknown"

    def __init__(self, restrict_to: Optional[Iterable[Restriction]] = None):
        self._restrictions = tuple(restrict_to or ())
        for restriction in self._restrictions:
            if not isinstance(restriction, Restriction):
                raise ConfigurationError(
                    f"{self.name}: restrictions must be Restriction objects, "
                    f"got {restriction!r}"
                )
        self._initialized = False

    @property
    def restrictions(self):
        return self._restrictions

    def is_applicable(self, metadata: Metadata) -> bool:
        """Check restrictions against the current metadata (no side effects)."""
        return matches(metadata, self._restrictions)

    def setup(self) -> None:
        """One-time initialization. Called before the first document if needed."""
        self._initialized = True
        logger.debug("✓ %s initialized", self.name)

    def teardown(self) -> None:
        self._initialized = False
        logger.debug("✓ %s teardown complete", self.name)

    def ensure_setup(self) -> None:
        """Ensure setup() has been called."""
        if not self._initialized:
            self.setup()

    def _params(self) -> Dict[str, Any]:
        return {}

    def to_config(self) -> Dict[str, Any]:
        """Configuration dict accepted by from_config()/build_handler()."""
        config: Dict[str, Any] = {"class": self.__class__.__name__}
        config.update(self._params())
        if self._restrictions:
            config["restrict_to"] = [r.to_config() for r in self._restrictions]
        return config

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "BaseHandler":
        raise NotImplementedError(f"{cls.__name__} cannot be built from configuration")

    @staticmethod
    def _restrictions_from(config: Dict[str, Any]) -> tuple:
        return restrictions_from_config(config.get("restrict_to"))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseHandler):
            return NotImplemented
        return self.to_config() == other.to_config()

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, repr(sorted(self._params().items()))))

    def __str__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self._params().items())
        return f"{self.name}[{params}]"

    def __enter__(self):
        self.setup()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.teardown()
        return False


class BaseTagger(BaseHandler):
    """Handler that mutates the document metadata (or content)."""

    handler_type = TAGGER

    @abstractmethod
    def tag_document(self, doc: ImporterDocument) -> None:
        raise NotImplementedError("Subclasses must implement tag_document()")


class BaseFilter(BaseHandler):
    """Handler that accepts or rejects a document without changing it."""

    handler_type = FILTER

    @abstractmethod
    def filter_document(self, doc: ImporterDocument) -> FilterDecision:
        raise NotImplementedError("Subclasses must implement filter_document()")


class BaseSplitter(BaseHandler):
    """Handler that replaces a document with an ordered list of children."""

    handler_type = SPLITTER

    @abstractmethod
    def split_document(self, doc: ImporterDocument) -> List[ImporterDocument]:
        raise NotImplementedError("Subclasses must implement split_document()")


def require(config: Dict[str, Any], key: str, handler_name: str) -> Any:
    """Return a required configuration value or raise ConfigurationError."""
    value = config.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ConfigurationError(f"{handler_name}: missing required '{key}'")
    return value
