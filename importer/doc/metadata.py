"""
metadata.py - Multi-valued metadata store shared by every handler.

Each field name maps to an ordered list of string values. Field lookup is an
exact match on the name; callers decide how to normalize names.
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DOC_PREFIX = "document."

DOC_URL = DOC_PREFIX + "url"
DOC_MIMETYPE = DOC_PREFIX + "contentType"
DOC_CHARSET = DOC_PREFIX + "contentEncoding"
DOC_CONTENT_LENGTH = DOC_PREFIX + "contentLength"
DOC_REFERENCED_URLS = DOC_PREFIX + "referencedUrls"
DOC_LANGUAGE = DOC_PREFIX + "language"
DOC_EMBEDDED_REFERENCE = DOC_PREFIX + "embeddedReference"
DOC_EMBEDDED_PARENT = DOC_PREFIX + "embeddedParentReference"

HTTP_CONTENT_TYPE = "Content-Type"
HTTP_CONTENT_LENGTH = "Content-Length"


def parse_content_type(value: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Split a content type header into its MIME type and charset.

    "text/html; charset=UTF-8" -> ("text/html", "UTF-8")
    """
    if not value:
        return None, None
    parts = value.split(";")
    mime = parts[0].strip().lower() or None
    charset = None
    for param in parts[1:]:
        key, _, param_value = param.partition("=")
        if key.strip().lower() == "charset" and param_value.strip():
            charset = param_value.strip().strip("\"'")
    return mime, charset


class Metadata:
    """
    Ordered, multi-valued key/value store.

    - Insertion order is preserved for fields and for values within a field.
    - A field with no values reads like an absent field but keeps its key.
    - Reading an absent field is never an error.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._fields: Dict[str, List[str]] = {}
        if initial:
            self.merge(initial)

    @staticmethod
    def _to_strings(field: str, values: Iterable[Any]) -> List[str]:
        strings = []
        for value in values:
            if value is None:
                raise TypeError(f"None is not a valid value for field '{field}'")
            strings.append(value if isinstance(value, str) else str(value))
        return strings

    def set_values(self, field: str, *values: Any) -> None:
        """Replace all values of a field. Values are stored as strings; None is rejected."""
        self._fields[field] = self._to_strings(field, values)

    def add_values(self, field: str, *values: Any) -> None:
        """Append every value to a field, creating it when absent. None is rejected."""
        strings = self._to_strings(field, values)
        self._fields.setdefault(field, []).extend(strings)

    def get_values(self, field: str) -> List[str]:
        """Return a copy of the values of a field (empty when absent)."""
        return list(self._fields.get(field, ()))

    def get_first(self, field: str) -> Optional[str]:
        values = self._fields.get(field)
        if values:
            return values[0]
        return None

    def has_values(self, field: str) -> bool:
        return bool(self._fields.get(field))

    def remove(self, field: str) -> List[str]:
        """Remove a field and return the values it held."""
        return self._fields.pop(field, [])

    def fields(self) -> List[str]:
        return list(self._fields)

    def merge(self, other: Mapping[str, Any]) -> None:
        """
        Append every field of a mapping (or another store).

        Scalar values are added as one value; lists and tuples add each item.
        """
        items = other.to_dict().items() if isinstance(other, Metadata) else other.items()
        for field, value in items:
            if isinstance(value, (list, tuple)):
                self.add_values(field, *value)
            else:
                self.add_values(field, value)

    def copy(self, exclude: Iterable[str] = ()) -> "Metadata":
        """Return an independent copy, leaving out the excluded fields."""
        excluded = set(exclude)
        clone = self.__class__.__new__(self.__class__)
        clone._fields = {
            field: list(values)
            for field, values in self._fields.items()
            if field not in excluded
        }
        return clone

    def to_dict(self) -> Dict[str, List[str]]:
        return {field: list(values) for field, values in self._fields.items()}

    def __contains__(self, field: object) -> bool:
        return field in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Metadata):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._fields!r})"


class DocumentMetadata(Metadata):
    """Metadata of one document, created with the document URL recorded."""

    def __init__(self, document_url: str, initial: Optional[Mapping[str, Any]] = None):
        super().__init__(initial)
        if document_url is not None and not self.has_values(DOC_URL):
            self.add_values(DOC_URL, document_url)

    @property
    def document_url(self) -> Optional[str]:
        return self.get_first(DOC_URL)

    @property
    def referenced_urls(self) -> List[str]:
        return self.get_values(DOC_REFERENCED_URLS)

    @property
    def content_type(self) -> Optional[str]:
        """MIME type from the HTTP header when present, else the detected one."""
        mime, _ = parse_content_type(
            self.get_first(HTTP_CONTENT_TYPE) or self.get_first(DOC_MIMETYPE)
        )
        return mime

    @property
    def charset(self) -> Optional[str]:
        return self.get_first(DOC_CHARSET)
