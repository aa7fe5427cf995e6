"""
pdf.py - PDF text and metadata extraction with PyMuPDF.

Encrypted PDFs are opened with the given password, or with the empty password
many PDFs are protected with when none is given.
"""

import logging
from typing import Dict, List, Optional, Tuple

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"

# PyMuPDF metadata key -> stored field name
_INFO_FIELDS = {
    "title": "dc:title",
    "author": "dc:creator",
    "subject": "dc:subject",
    "keywords": "pdf:docinfo:keywords",
    "creator": "pdf:docinfo:creator_tool",
    "producer": "pdf:docinfo:producer",
    "creationDate": "pdf:docinfo:created",
    "modDate": "pdf:docinfo:modified",
}


class PDFExtractionError(ValueError):
    """The PDF could not be opened or decrypted."""


def _pdf_version(format_value: Optional[str]) -> Optional[str]:
    # "PDF 1.7" -> "1.7"
    if format_value and format_value.upper().startswith("PDF"):
        return format_value[3:].strip() or None
    return None


def extract_pdf(
    content: bytes, password: Optional[str] = None
) -> Tuple[str, Dict[str, List[str]]]:
    """
    Extract plain text and metadata fields from PDF bytes.

    Returns:
        (text, fields) where fields maps a field name to its values
    """
    try:
        doc = fitz.open(stream=content, filetype="pdf")
    except (RuntimeError, ValueError) as exc:
        raise PDFExtractionError(f"Cannot open PDF: {exc}") from exc

    try:
        encrypted = bool(doc.needs_pass)
        if encrypted and not doc.authenticate(password or ""):
            raise PDFExtractionError("PDF is encrypted and the password was rejected")

        pages = [page.get_text() for page in doc]
        text = PAGE_SEPARATOR.join(page_text.strip() for page_text in pages)

        fields: Dict[str, List[str]] = {
            "xmpTPg:NPages": [str(doc.page_count)],
            "pdf:encrypted": [str(encrypted).lower()],
        }
        info = doc.metadata or {}
        version = _pdf_version(info.get("format"))
        if version:
            fields["pdf:PDFVersion"] = [version]
            fields["dc:format"] = [f"application/pdf; version={version}"]
        for key, field in _INFO_FIELDS.items():
            value = info.get(key)
            if value:
                fields[field] = [value]
        return text, fields
    finally:
        doc.close()
