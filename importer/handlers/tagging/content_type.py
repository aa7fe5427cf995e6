"""Tagger recording the document content type, charset and length."""

import logging
from typing import Any, Dict, Iterable, Optional

from importer.doc.document import ImporterDocument
from importer.doc.metadata import (
    DOC_CHARSET,
    DOC_CONTENT_LENGTH,
    DOC_MIMETYPE,
    HTTP_CONTENT_TYPE,
    parse_content_type,
)
from importer.handlers.base import BaseTagger, config_flag
from importer.handlers.parsing.content_type import detect_content_type
from importer.handlers.restrictions import Restriction

logger = logging.getLogger(__name__)


class ContentTypeTagger(BaseTagger):
    """
    Store the MIME type under document.contentType.

    A Content-Type header already in the metadata wins over detection. Any
    parameter suffix is stripped; a charset parameter goes to
    document.contentEncoding.
    """

    name = "ContentTypeTagger"

    def __init__(
        self, overwrite: bool = False, restrict_to: Optional[Iterable[Restriction]] = None
    ):
        super().__init__(restrict_to)
        self.overwrite = bool(overwrite)

    def tag_document(self, doc: ImporterDocument) -> None:
        metadata = doc.metadata
        metadata.set_values(DOC_CONTENT_LENGTH, len(doc.content))
        if metadata.has_values(DOC_MIMETYPE) and not self.overwrite:
            return

        header = metadata.get_first(HTTP_CONTENT_TYPE)
        mime, charset = parse_content_type(header)
        if not mime:
            mime, _ = parse_content_type(detect_content_type(doc.content, doc.reference))
        metadata.set_values(DOC_MIMETYPE, mime)
        if charset and (self.overwrite or not metadata.has_values(DOC_CHARSET)):
            metadata.set_values(DOC_CHARSET, charset)
        logger.debug("Content type of %s: %s", doc.reference, mime)

    def _params(self) -> Dict[str, Any]:
        return {"overwrite": self.overwrite}

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ContentTypeTagger":
        return cls(
            overwrite=config_flag(config, "overwrite", False, cls.name),
            restrict_to=cls._restrictions_from(config),
        )
