"""Document handed from one pipeline handler to the next."""

import codecs
import logging
from typing import Iterable, Optional, Union

from importer.doc.metadata import (
    DOC_CHARSET,
    DOC_CONTENT_LENGTH,
    DOC_EMBEDDED_PARENT,
    DOC_URL,
    DocumentMetadata,
)

logger = logging.getLogger(__name__)

DEFAULT_CHARSET = "utf-8"


class ImporterDocument:
    """
    Content handle plus the metadata owned by this document.

    Content is kept as bytes; text handlers go through get_text()/set_text().
    """

    def __init__(
        self,
        reference: str,
        content: Union[bytes, str] = b"",
        metadata: Optional[DocumentMetadata] = None,
    ):
        self.reference = reference
        self.metadata = metadata if metadata is not None else DocumentMetadata(reference)
        if isinstance(content, str):
            self.content = b""
            self.set_text(content)
        else:
            self.content = content

    @property
    def charset(self) -> str:
        charset = self.metadata.get_first(DOC_CHARSET)
        if charset:
            try:
                codecs.lookup(charset)
                return charset
            except LookupError:
                logger.warning(
                    "Unknown charset '%s' for %s, using %s",
                    charset,
                    self.reference,
                    DEFAULT_CHARSET,
                )
        return DEFAULT_CHARSET

    def get_text(self) -> str:
        return self.content.decode(self.charset, errors="replace")

    def set_text(self, text: str) -> None:
        """Replace the content with UTF-8 encoded text."""
        self.content = text.encode(DEFAULT_CHARSET)
        self.metadata.set_values(DOC_CHARSET, DEFAULT_CHARSET)
        self.metadata.set_values(DOC_CONTENT_LENGTH, len(self.content))

    def derive_child(
        self,
        reference: str,
        content: Union[bytes, str],
        exclude_fields: Iterable[str] = (),
    ) -> "ImporterDocument":
        """
        Build a child document (e.g. one split part).

        The child inherits every parent field except the excluded ones; its
        URL and parent reference are overwritten.
        """
        metadata = self.metadata.copy(exclude=exclude_fields)
        metadata.set_values(DOC_URL, reference)
        metadata.set_values(DOC_EMBEDDED_PARENT, self.reference)
        if isinstance(content, str):
            metadata.set_values(DOC_CHARSET, DEFAULT_CHARSET)
        return ImporterDocument(reference, content, metadata)

    def __repr__(self) -> str:
        return f"ImporterDocument({self.reference!r}, {len(self.content)} bytes)"
