"""Explicit mapping from configured handler class names to handler classes."""

import logging
from typing import Any, Dict, Iterable, List, Type

from importer.errors import ConfigurationError
from importer.handlers.base import BaseHandler
from importer.handlers.filtering.regex_filter import (
    RegexContentFilter,
    RegexMetadataFilter,
)
from importer.handlers.splitting.text_splitter import TextSplitter
from importer.handlers.tagging.content_type import ContentTypeTagger
from importer.handlers.tagging.dom import DOMTagger
from importer.handlers.tagging.language import LanguageTagger
from importer.handlers.tagging.pdf import PDFParseTagger
from importer.handlers.tagging.text_between import TextBetweenTagger
from importer.handlers.tagging.uuid_tagger import UUIDTagger

logger = logging.getLogger(__name__)

HANDLER_CLASSES: Dict[str, Type[BaseHandler]] = {
    cls.__name__: cls
    for cls in (
        ContentTypeTagger,
        DOMTagger,
        LanguageTagger,
        PDFParseTagger,
        RegexContentFilter,
        RegexMetadataFilter,
        TextBetweenTagger,
        TextSplitter,
        UUIDTagger,
    )
}


def build_handler(config: Dict[str, Any]) -> BaseHandler:
    """Build one handler from its configuration dict ("class" selects the type)."""
    if not isinstance(config, dict):
        raise ConfigurationError(f"Handler configuration must be an object, got {config!r}")
    class_name = config.get("class")
    if not class_name:
        raise ConfigurationError(f"No handler class defined in {config!r}")
    handler_cls = HANDLER_CLASSES.get(class_name)
    if handler_cls is None:
        raise ConfigurationError(
            f"Handler class '{class_name}' does not exist. "
            f"Available: {sorted(HANDLER_CLASSES)}"
        )
    return handler_cls.from_config(config)


def build_handlers(configs: Iterable[Dict[str, Any]]) -> List[BaseHandler]:
    handlers = []
    for position, config in enumerate(configs):
        try:
            handlers.append(build_handler(config))
        except ConfigurationError as exc:
            raise ConfigurationError(f"handlers[{position}]: {exc}") from exc
    logger.debug("Built %d handlers: %s", len(handlers), [h.name for h in handlers])
    return handlers
