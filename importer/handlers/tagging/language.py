"""Language detection tagger."""

import logging
from typing import Any, Dict, Iterable, Optional

from langdetect import DetectorFactory, detect_langs
from langdetect.lang_detect_exception import LangDetectException

from importer.doc.document import ImporterDocument
from importer.doc.metadata import DOC_LANGUAGE
from importer.errors import ConfigurationError
from importer.handlers.base import BaseTagger
from importer.handlers.restrictions import Restriction

logger = logging.getLogger(__name__)

# langdetect is non-deterministic unless seeded
DetectorFactory.seed = 0


class LanguageTagger(BaseTagger):
    """
    Detect the document language from a sample of its text.

    Stores the ISO 639-1 code of the most probable language when its
    probability reaches `min_probability`; stores nothing otherwise.
    """

    name = "LanguageTagger"

    def __init__(
        self,
        field: str = DOC_LANGUAGE,
        min_probability: float = 0.5,
        sample_size: int = 5000,
        restrict_to: Optional[Iterable[Restriction]] = None,
    ):
        super().__init__(restrict_to)
        if not 0 <= float(min_probability) <= 1:
            raise ConfigurationError(f"{self.name}: 'min_probability' must be in [0, 1]")
        if int(sample_size) <= 0:
            raise ConfigurationError(f"{self.name}: 'sample_size' must be positive")
        self.field = field or DOC_LANGUAGE
        self.min_probability = float(min_probability)
        self.sample_size = int(sample_size)

    def tag_document(self, doc: ImporterDocument) -> None:
        sample = doc.get_text()[: self.sample_size]
        if not sample.strip():
            return
        try:
            results = detect_langs(sample)
        except LangDetectException as exc:
            logger.debug("No language detected for %s: %s", doc.reference, exc)
            return
        if results and results[0].prob >= self.min_probability:
            doc.metadata.set_values(self.field, results[0].lang)
        else:
            logger.debug("Language of %s below confidence threshold", doc.reference)

    def _params(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "min_probability": self.min_probability,
            "sample_size": self.sample_size,
        }

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "LanguageTagger":
        try:
            return cls(
                field=config.get("field", DOC_LANGUAGE),
                min_probability=float(config.get("min_probability", 0.5)),
                sample_size=int(config.get("sample_size", 5000)),
                restrict_to=cls._restrictions_from(config),
            )
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"{cls.name}: {exc}") from exc
