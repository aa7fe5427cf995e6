"""Splitters: handlers that turn one document into several."""

from importer.handlers.splitting.text_splitter import TextSplitter

__all__ = ["TextSplitter"]
