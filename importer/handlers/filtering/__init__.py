"""Filters: handlers that accept or reject documents."""

from importer.handlers.filtering.regex_filter import (
    ON_MATCH_EXCLUDE,
    ON_MATCH_INCLUDE,
    RegexContentFilter,
    RegexMetadataFilter,
)

__all__ = [
    "ON_MATCH_EXCLUDE",
    "ON_MATCH_INCLUDE",
    "RegexContentFilter",
    "RegexMetadataFilter",
]
