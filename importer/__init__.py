"""
docimporter - configurable document import pipeline.

A document (content plus a multi-valued metadata store) is passed through an
ordered chain of handlers. Each handler is gated by its restrictions and then
tags, filters, or splits the document.

Usage:
    from importer import ImporterDocument, ImporterPipeline
    from importer.handlers import TextBetween, TextBetweenTagger

    pipeline = ImporterPipeline(
        [TextBetweenTagger([TextBetween("content", "OPEN", "CLOSE")])]
    )
    response = pipeline.import_document(
        ImporterDocument("doc-1", b"x OPEN hello CLOSE y")
    )
"""

from importer.doc import DocumentMetadata, ImporterDocument, Metadata
from importer.errors import (
    ConfigurationError,
    ImportCancelledError,
    ImporterHandlerError,
)
from importer.orchestrator.driver import (
    FaultPolicy,
    ImporterPipeline,
    ImporterResponse,
    ImporterState,
    SplitPolicy,
)

__all__ = [
    "ConfigurationError",
    "DocumentMetadata",
    "FaultPolicy",
    "ImportCancelledError",
    "ImporterDocument",
    "ImporterHandlerError",
    "ImporterPipeline",
    "ImporterResponse",
    "ImporterState",
    "Metadata",
    "SplitPolicy",
]
