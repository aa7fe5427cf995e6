"""Bindings to external parsing and detection libraries."""

from importer.handlers.parsing.content_type import detect_content_type
from importer.handlers.parsing.pdf import PDFExtractionError, extract_pdf

__all__ = ["PDFExtractionError", "detect_content_type", "extract_pdf"]
