"""Taggers: handlers that add or overwrite document metadata."""

from importer.handlers.tagging.content_type import ContentTypeTagger
from importer.handlers.tagging.dom import DOMTagger
from importer.handlers.tagging.language import LanguageTagger
from importer.handlers.tagging.pdf import PDFParseTagger
from importer.handlers.tagging.text_between import TextBetween, TextBetweenTagger
from importer.handlers.tagging.uuid_tagger import UUIDTagger

__all__ = [
    "ContentTypeTagger",
    "DOMTagger",
    "LanguageTagger",
    "PDFParseTagger",
    "TextBetween",
    "TextBetweenTagger",
    "UUIDTagger",
]
