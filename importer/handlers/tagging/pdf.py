"""Tagger replacing PDF content with its text and merging PDF metadata."""

import logging
from typing import Any, Dict, Iterable, Optional

from importer.doc.document import ImporterDocument
from importer.handlers.base import BaseTagger
from importer.handlers.parsing.pdf import extract_pdf
from importer.handlers.restrictions import Restriction

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD_FIELD = "pdf.password"


class PDFParseTagger(BaseTagger):
    """
    Parse PDF content into plain text.

    The password is read from `password_field` in the document metadata,
    falling back to the configured `password`. Extraction failures propagate
    to the driver as handler faults.
    """

    name = "PDFParseTagger"

    def __init__(
        self,
        password: Optional[str] = None,
        password_field: str = DEFAULT_PASSWORD_FIELD,
        restrict_to: Optional[Iterable[Restriction]] = None,
    ):
        super().__init__(restrict_to)
        self.password = password
        self.password_field = password_field or DEFAULT_PASSWORD_FIELD

    def tag_document(self, doc: ImporterDocument) -> None:
        password = doc.metadata.get_first(self.password_field) or self.password
        text, fields = extract_pdf(doc.content, password)
        doc.set_text(text)
        doc.metadata.merge(fields)
        logger.info(
            "Parsed PDF %s (%s pages, %d chars)",
            doc.reference,
            fields.get("xmpTPg:NPages", ["?"])[0],
            len(text),
        )

    def _params(self) -> Dict[str, Any]:
        # password is not exported
        return {"password_field": self.password_field}

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "PDFParseTagger":
        return cls(
            password=config.get("password"),
            password_field=config.get("password_field", DEFAULT_PASSWORD_FIELD),
            restrict_to=cls._restrictions_from(config),
        )
