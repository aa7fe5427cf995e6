"""
Pipeline handlers package.

Each handler:
- Implements one capability of BaseTagger / BaseFilter / BaseSplitter
- Carries immutable restrictions gating whether it applies
- Is built from configuration through build_handler()

Usage:
    from importer.handlers import TextBetween, TextBetweenTagger

    tagger = TextBetweenTagger([TextBetween("content", "OPEN", "CLOSE")])
    tagger.tag_document(doc)
"""

from importer.handlers.base import (
    FILTER,
    SPLITTER,
    TAGGER,
    BaseFilter,
    BaseHandler,
    BaseSplitter,
    BaseTagger,
)
from importer.handlers.decisions import (
    FilterDecision,
    FilterDecisionTracker,
    FilterPolicy,
)
from importer.handlers.filtering import RegexContentFilter, RegexMetadataFilter
from importer.handlers.registry import HANDLER_CLASSES, build_handler, build_handlers
from importer.handlers.restrictions import Restriction, matches
from importer.handlers.splitting import TextSplitter
from importer.handlers.tagging import (
    ContentTypeTagger,
    DOMTagger,
    LanguageTagger,
    PDFParseTagger,
    TextBetween,
    TextBetweenTagger,
    UUIDTagger,
)

__all__ = [
    "FILTER",
    "HANDLER_CLASSES",
    "SPLITTER",
    "TAGGER",
    "BaseFilter",
    "BaseHandler",
    "BaseSplitter",
    "BaseTagger",
    "ContentTypeTagger",
    "DOMTagger",
    "FilterDecision",
    "FilterDecisionTracker",
    "FilterPolicy",
    "LanguageTagger",
    "PDFParseTagger",
    "RegexContentFilter",
    "RegexMetadataFilter",
    "Restriction",
    "TextBetween",
    "TextBetweenTagger",
    "TextSplitter",
    "UUIDTagger",
    "build_handler",
    "build_handlers",
    "matches",
]
