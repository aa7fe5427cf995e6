"""Splitter cutting text content into child documents on a separator."""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from importer.doc.document import ImporterDocument
from importer.doc.metadata import DOC_EMBEDDED_REFERENCE
from importer.handlers.base import BaseSplitter, config_flag, require
from importer.handlers.restrictions import Restriction, compile_pattern

logger = logging.getLogger(__name__)

REFERENCE_SEPARATOR = "!"


class TextSplitter(BaseSplitter):
    """
    Split the document text on a regex separator.

    Children are named "<parent>!<index>" (index starts at 0), inherit the
    parent metadata minus `exclude_fields`, and record their index under
    document.embeddedReference. Blank parts are dropped unless `keep_empty`.
    """

    name = "TextSplitter"

    def __init__(
        self,
        separator: str,
        exclude_fields: Iterable[str] = (),
        keep_empty: bool = False,
        case_sensitive: bool = True,
        restrict_to: Optional[Iterable[Restriction]] = None,
    ):
        super().__init__(restrict_to)
        self.separator = separator
        self.exclude_fields = tuple(exclude_fields or ())
        self.keep_empty = bool(keep_empty)
        self.case_sensitive = bool(case_sensitive)
        flags = 0 if self.case_sensitive else re.IGNORECASE
        self._pattern = compile_pattern(separator, flags, self.name)

    def split_document(self, doc: ImporterDocument) -> List[ImporterDocument]:
        parts = self._pattern.split(doc.get_text())
        if self._pattern.groups:
            # drop captured separators
            parts = parts[:: self._pattern.groups + 1]
        if not self.keep_empty:
            parts = [part for part in parts if part.strip()]

        children = []
        for index, part in enumerate(parts):
            child = doc.derive_child(
                f"{doc.reference}{REFERENCE_SEPARATOR}{index}",
                part,
                exclude_fields=self.exclude_fields,
            )
            child.metadata.set_values(DOC_EMBEDDED_REFERENCE, index)
            children.append(child)
        logger.debug("%s split %s into %d part(s)", self.name, doc.reference, len(children))
        return children

    def _params(self) -> Dict[str, Any]:
        return {
            "separator": self.separator,
            "exclude_fields": list(self.exclude_fields),
            "keep_empty": self.keep_empty,
            "case_sensitive": self.case_sensitive,
        }

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "TextSplitter":
        return cls(
            separator=require(config, "separator", cls.name),
            exclude_fields=config.get("exclude_fields", ()),
            keep_empty=config_flag(config, "keep_empty", False, cls.name),
            case_sensitive=config_flag(config, "case_sensitive", True, cls.name),
            restrict_to=cls._restrictions_from(config),
        )
