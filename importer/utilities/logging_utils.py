"""Logging helpers carrying the current document reference."""

import logging
import threading

_log_context = threading.local()


class ContextFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """
    Filter to inject the document reference being imported into log records.
    """

    def filter(self, record):
        record.doc_id = getattr(_log_context, "doc_id", None) or "N/A"
        return True
