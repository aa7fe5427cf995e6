"""Tagger giving each document a random UUID."""

import uuid
from typing import Any, Dict, Iterable, Optional

from importer.doc.document import ImporterDocument
from importer.handlers.base import BaseTagger, config_flag
from importer.handlers.restrictions import Restriction

DEFAULT_UUID_FIELD = "document.uuid"


class UUIDTagger(BaseTagger):
    """Store a UUID4 under `field`, replacing existing values when `overwrite`."""

    name = "UUIDTagger"

    def __init__(
        self,
        field: str = DEFAULT_UUID_FIELD,
        overwrite: bool = True,
        restrict_to: Optional[Iterable[Restriction]] = None,
    ):
        super().__init__(restrict_to)
        self.field = field or DEFAULT_UUID_FIELD
        self.overwrite = bool(overwrite)

    def tag_document(self, doc: ImporterDocument) -> None:
        value = str(uuid.uuid4())
        if self.overwrite:
            doc.metadata.set_values(self.field, value)
        else:
            doc.metadata.add_values(self.field, value)

    def _params(self) -> Dict[str, Any]:
        return {"field": self.field, "overwrite": self.overwrite}

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "UUIDTagger":
        return cls(
            field=config.get("field", DEFAULT_UUID_FIELD),
            overwrite=config_flag(config, "overwrite", True, cls.name),
            restrict_to=cls._restrictions_from(config),
        )
