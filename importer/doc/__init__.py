"""Document and metadata model."""

from importer.doc.document import ImporterDocument
from importer.doc.metadata import (
    DOC_CHARSET,
    DOC_CONTENT_LENGTH,
    DOC_EMBEDDED_PARENT,
    DOC_EMBEDDED_REFERENCE,
    DOC_LANGUAGE,
    DOC_MIMETYPE,
    DOC_REFERENCED_URLS,
    DOC_URL,
    HTTP_CONTENT_LENGTH,
    HTTP_CONTENT_TYPE,
    DocumentMetadata,
    Metadata,
    parse_content_type,
)

__all__ = [
    "DOC_CHARSET",
    "DOC_CONTENT_LENGTH",
    "DOC_EMBEDDED_PARENT",
    "DOC_EMBEDDED_REFERENCE",
    "DOC_LANGUAGE",
    "DOC_MIMETYPE",
    "DOC_REFERENCED_URLS",
    "DOC_URL",
    "HTTP_CONTENT_LENGTH",
    "HTTP_CONTENT_TYPE",
    "DocumentMetadata",
    "ImporterDocument",
    "Metadata",
    "parse_content_type",
]
