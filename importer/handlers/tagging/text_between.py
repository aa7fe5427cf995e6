"""
text_between.py - Extract text found between start and end patterns.

Pairs of start/end regular expressions are each bound to a target field. The
field of a pair is multi-valued: every match is appended.

Configuration example:

    {
        "class": "TextBetweenTagger",
        "inclusive": false,
        "case_sensitive": false,
        "betweens": [
            {"name": "content", "start": "OPEN", "end": "CLOSE"}
        ]
    }
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from importer.doc.document import ImporterDocument
from importer.errors import ConfigurationError
from importer.handlers.base import BaseTagger, config_flag
from importer.handlers.restrictions import Restriction, compile_pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextBetween:
    """Named start/end pattern pair. Sorted by (start, end, name)."""

    name: str
    start: str
    end: str

    def sort_key(self) -> Tuple[str, str, str]:
        return (self.start, self.end, self.name)

    def to_config(self) -> Dict[str, str]:
        return {"name": self.name, "start": self.start, "end": self.end}


class TextBetweenTagger(BaseTagger):
    """
    Tagger storing the text between matching start and end patterns.

    - Patterns always match across newlines (DOTALL).
    - case_sensitive applies to every pair.
    - inclusive keeps the start/end text in the extracted value.
    """

    name = "TextBetweenTagger"

    def __init__(
        self,
        betweens: Iterable[TextBetween],
        inclusive: bool = False,
        case_sensitive: bool = False,
        restrict_to: Optional[Iterable[Restriction]] = None,
    ):
        super().__init__(restrict_to)
        self.inclusive = bool(inclusive)
        self.case_sensitive = bool(case_sensitive)

        unique = []
        for between in betweens:
            self._validate(between)
            if between not in unique:
                unique.append(between)
        if not unique:
            raise ConfigurationError(f"{self.name}: at least one text pair is required")
        self._betweens: Tuple[TextBetween, ...] = tuple(
            sorted(unique, key=TextBetween.sort_key)
        )

        flags = re.DOTALL
        if not self.case_sensitive:
            flags |= re.IGNORECASE
        self._compiled: Tuple[Tuple[TextBetween, re.Pattern, re.Pattern], ...] = tuple(
            (
                between,
                compile_pattern(between.start, flags, f"{self.name} '{between.name}'"),
                compile_pattern(between.end, flags, f"{self.name} '{between.name}'"),
            )
            for between in self._betweens
        )

    @property
    def betweens(self) -> Tuple[TextBetween, ...]:
        return self._betweens

    def _validate(self, between: TextBetween) -> None:
        for attr in ("name", "start", "end"):
            value = getattr(between, attr, None)
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(
                    f"{self.name}: text pair {between!r} has a blank '{attr}'"
                )

    def _find_ranges(
        self, text: str, start_pattern: re.Pattern, end_pattern: re.Pattern
    ) -> List[Tuple[int, int]]:
        ranges = []
        for start_match in start_pattern.finditer(text):
            end_match = end_pattern.search(text, start_match.end())
            if end_match is None:
                # An unterminated start ends scanning for this pair.
                break
            if self.inclusive:
                ranges.append((start_match.start(), end_match.end()))
            else:
                ranges.append((start_match.end(), end_match.start()))
        return ranges

    def extract(self, text: str) -> List[Tuple[str, str]]:
        """
        Return (field, value) pairs in the order they are to be stored.

        Pairs are processed in sort order; within a pair, values come in
        reverse discovery order (last range first).
        """
        extracted = []
        for between, start_pattern, end_pattern in self._compiled:
            ranges = self._find_ranges(text, start_pattern, end_pattern)
            for begin, finish in reversed(ranges):
                extracted.append((between.name, text[begin:finish]))
        return extracted

    def tag_document(self, doc: ImporterDocument) -> None:
        extracted = self.extract(doc.get_text())
        for field, value in extracted:
            doc.metadata.add_values(field, value)
        logger.debug(
            "%s extracted %d value(s) from %s", self.name, len(extracted), doc.reference
        )

    def _params(self) -> Dict[str, Any]:
        return {
            "inclusive": self.inclusive,
            "case_sensitive": self.case_sensitive,
            "betweens": [between.to_config() for between in self._betweens],
        }

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "TextBetweenTagger":
        betweens = config.get("betweens")
        if not isinstance(betweens, list):
            raise ConfigurationError(f"{cls.name}: 'betweens' must be a list")
        pairs = []
        for item in betweens:
            if not isinstance(item, dict):
                raise ConfigurationError(f"{cls.name}: invalid text pair {item!r}")
            pairs.append(TextBetween(item.get("name"), item.get("start"), item.get("end")))
        return cls(
            pairs,
            inclusive=config_flag(config, "inclusive", False, cls.name),
            case_sensitive=config_flag(config, "case_sensitive", False, cls.name),
            restrict_to=cls._restrictions_from(config),
        )
