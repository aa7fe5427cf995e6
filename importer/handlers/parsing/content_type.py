"""Content-type detection from a document name and its leading bytes."""

import logging
import mimetypes
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# (prefix, content type), checked in order
_MAGIC_PREFIXES = [
    (b"%PDF-", "application/pdf"),
    (b"PK\x03\x04", "application/zip"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1", "application/x-tika-msoffice"),
]

_MARKUP_PREFIXES = [
    (b"<!doctype html", "text/html"),
    (b"<html", "text/html"),
    (b"<?xml", "application/xml"),
]


def _sniff(content: bytes) -> Optional[str]:
    head = content[:512]
    for prefix, content_type in _MAGIC_PREFIXES:
        if head.startswith(prefix):
            return content_type
    stripped = head.lstrip(b"\xef\xbb\xbf \t\r\n").lower()
    for prefix, content_type in _MARKUP_PREFIXES:
        if stripped.startswith(prefix):
            return content_type
    if not head:
        return None
    try:
        head.decode("utf-8")
    except UnicodeDecodeError as exc:
        # A multi-byte character cut at the sample boundary is still text
        if exc.start < len(head) - 3:
            return None
    return "text/plain"


def detect_content_type(content: bytes, name: Optional[str] = None) -> str:
    """
    Detect a content type, without parameters.

    Magic bytes win for binary formats; otherwise the name extension is used,
    then a plain-text check.
    """
    sniffed = _sniff(content or b"")
    if sniffed and sniffed not in ("text/plain", "application/xml"):
        return sniffed
    if name:
        guessed, _ = mimetypes.guess_type(name, strict=False)
        if guessed:
            return guessed
    return sniffed or DEFAULT_CONTENT_TYPE
