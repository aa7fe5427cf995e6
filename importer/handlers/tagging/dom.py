"""DOM tagger: store the results of a CSS selector query into a field."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from bs4 import BeautifulSoup
from soupsieve import SelectorSyntaxError

from importer.doc.document import ImporterDocument
from importer.errors import ConfigurationError
from importer.handlers.base import BaseTagger, config_flag, require
from importer.handlers.restrictions import Restriction

logger = logging.getLogger(__name__)

EXTRACT_TEXT = "text"
EXTRACT_HTML = "html"
EXTRACT_ATTR_PREFIX = "attr:"


def select_values(
    markup: bytes, selector: str, extract: str = EXTRACT_TEXT, charset: Optional[str] = None
) -> List[str]:
    """
    Parse markup and return the selected elements' values in document order.

    extract: "text" (element text), "html" (outer markup) or "attr:<name>".
    """
    soup = BeautifulSoup(markup, "html.parser", from_encoding=charset)
    values = []
    for element in soup.select(selector):
        if extract == EXTRACT_TEXT:
            values.append(element.get_text().strip())
        elif extract == EXTRACT_HTML:
            values.append(str(element))
        else:
            attr_value = element.get(extract[len(EXTRACT_ATTR_PREFIX):])
            if attr_value is None:
                continue
            if isinstance(attr_value, list):
                attr_value = " ".join(attr_value)
            values.append(attr_value)
    return values


class DOMTagger(BaseTagger):
    """Extract values from HTML/XML content with a CSS selector."""

    name = "DOMTagger"

    def __init__(
        self,
        selector: str,
        to_field: str,
        extract: str = EXTRACT_TEXT,
        overwrite: bool = False,
        restrict_to: Optional[Iterable[Restriction]] = None,
    ):
        super().__init__(restrict_to)
        if not selector or not to_field:
            raise ConfigurationError(f"{self.name}: 'selector' and 'to_field' are required")
        if extract not in (EXTRACT_TEXT, EXTRACT_HTML) and not (
            extract.startswith(EXTRACT_ATTR_PREFIX) and len(extract) > len(EXTRACT_ATTR_PREFIX)
        ):
            raise ConfigurationError(
                f"{self.name}: 'extract' must be 'text', 'html' or 'attr:<name>', got {extract!r}"
            )
        self.selector = selector
        self.to_field = to_field
        self.extract = extract
        self.overwrite = bool(overwrite)
        self._validate_selector()

    def _validate_selector(self) -> None:
        try:
            BeautifulSoup("", "html.parser").select(self.selector)
        except (SelectorSyntaxError, ValueError) as exc:
            raise ConfigurationError(
                f"{self.name}: invalid selector {self.selector!r}: {exc}"
            ) from exc

    def tag_document(self, doc: ImporterDocument) -> None:
        values = select_values(doc.content, self.selector, self.extract, doc.charset)
        if self.overwrite:
            doc.metadata.set_values(self.to_field, *values)
        else:
            doc.metadata.add_values(self.to_field, *values)
        logger.debug(
            "%s selected %d value(s) for '%s' from %s",
            self.name,
            len(values),
            self.to_field,
            doc.reference,
        )

    def _params(self) -> Dict[str, Any]:
        return {
            "selector": self.selector,
            "to_field": self.to_field,
            "extract": self.extract,
            "overwrite": self.overwrite,
        }

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DOMTagger":
        return cls(
            selector=require(config, "selector", cls.name),
            to_field=require(config, "to_field", cls.name),
            extract=config.get("extract", EXTRACT_TEXT),
            overwrite=config_flag(config, "overwrite", False, cls.name),
            restrict_to=cls._restrictions_from(config),
        )
