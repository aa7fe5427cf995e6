"""
regex_filter.py - Accept or reject documents on a regular expression.

on_match="include": the document is rejected unless the pattern matches.
on_match="exclude": the document is rejected when the pattern matches.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from importer.doc.document import ImporterDocument
from importer.errors import ConfigurationError
from importer.handlers.base import BaseFilter, config_flag, require
from importer.handlers.decisions import FilterDecision
from importer.handlers.restrictions import Restriction, compile_pattern

logger = logging.getLogger(__name__)

ON_MATCH_INCLUDE = "include"
ON_MATCH_EXCLUDE = "exclude"


class _RegexFilter(BaseFilter):
    name = "RegexFilter"

    def __init__(
        self,
        regex: str,
        on_match: str = ON_MATCH_INCLUDE,
        case_sensitive: bool = False,
        restrict_to: Optional[Iterable[Restriction]] = None,
    ):
        super().__init__(restrict_to)
        if on_match not in (ON_MATCH_INCLUDE, ON_MATCH_EXCLUDE):
            raise ConfigurationError(
                f"{self.name}: 'on_match' must be 'include' or 'exclude', got {on_match!r}"
            )
        if not regex:
            raise ConfigurationError(f"{self.name}: missing required 'regex'")
        self.regex = regex
        self.on_match = on_match
        self.case_sensitive = bool(case_sensitive)
        flags = re.DOTALL if self.case_sensitive else re.DOTALL | re.IGNORECASE
        self._pattern = compile_pattern(regex, flags, self.name)

    def _values(self, doc: ImporterDocument) -> List[str]:
        raise NotImplementedError

    def _source(self) -> str:
        raise NotImplementedError

    def filter_document(self, doc: ImporterDocument) -> FilterDecision:
        matched = any(self._pattern.search(value) for value in self._values(doc))
        if matched == (self.on_match == ON_MATCH_INCLUDE):
            return FilterDecision.accepted()
        if matched:
            reason = f"{self._source()} matches excluded pattern {self.regex!r}"
        else:
            reason = f"{self._source()} does not match required pattern {self.regex!r}"
        logger.debug("%s rejected %s: %s", self.name, doc.reference, reason)
        return FilterDecision.rejected(self, f"{self.name}: {reason}")

    def _params(self) -> Dict[str, Any]:
        return {
            "regex": self.regex,
            "on_match": self.on_match,
            "case_sensitive": self.case_sensitive,
        }


class RegexMetadataFilter(_RegexFilter):
    """Filter on the values of one metadata field (any value may match)."""

    name = "RegexMetadataFilter"

    def __init__(
        self,
        field: str,
        regex: str,
        on_match: str = ON_MATCH_INCLUDE,
        case_sensitive: bool = False,
        restrict_to: Optional[Iterable[Restriction]] = None,
    ):
        if not field:
            raise ConfigurationError(f"{self.name}: missing required 'field'")
        self.field = field
        super().__init__(regex, on_match, case_sensitive, restrict_to)

    def _values(self, doc: ImporterDocument) -> List[str]:
        return doc.metadata.get_values(self.field)

    def _source(self) -> str:
        return f"field '{self.field}'"

    def _params(self) -> Dict[str, Any]:
        params = {"field": self.field}
        params.update(super()._params())
        return params

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "RegexMetadataFilter":
        return cls(
            field=require(config, "field", cls.name),
            regex=require(config, "regex", cls.name),
            on_match=config.get("on_match", ON_MATCH_INCLUDE),
            case_sensitive=config_flag(config, "case_sensitive", False, cls.name),
            restrict_to=cls._restrictions_from(config),
        )


class RegexContentFilter(_RegexFilter):
    """Filter on the document text."""

    name = "RegexContentFilter"

    def _values(self, doc: ImporterDocument) -> List[str]:
        return [doc.get_text()]

    def _source(self) -> str:
        return "content"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "RegexContentFilter":
        return cls(
            regex=require(config, "regex", cls.name),
            on_match=config.get("on_match", ON_MATCH_INCLUDE),
            case_sensitive=config_flag(config, "case_sensitive", False, cls.name),
            restrict_to=cls._restrictions_from(config),
        )
