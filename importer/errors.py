"""Exceptions raised by the import pipeline."""

from typing import Optional


class ConfigurationError(ValueError):
    """Invalid handler or pipeline configuration, raised at assembly time."""


class ImporterHandlerError(RuntimeError):
    """A handler failed on a document and the pipeline is set to abort."""

    def __init__(self, handler_name: str, reference: Optional[str], message: str):
        super().__init__(f"{handler_name} failed on {reference}: {message}")
        self.handler_name = handler_name
        self.reference = reference
        self.message = message

    def __reduce__(self):
        # raised inside pool workers and re-raised in the parent
        return (self.__class__, (self.handler_name, self.reference, self.message))


class ImportCancelledError(RuntimeError):
    """Processing of a document was cancelled between two handlers."""

    def __init__(self, reference: Optional[str], after_handler: Optional[str] = None):
        message = f"Import of {reference} cancelled"
        if after_handler:
            message += f" after {after_handler}"
        super().__init__(message)
        self.reference = reference
        self.after_handler = after_handler

    def __reduce__(self):
        return (self.__class__, (self.reference, self.after_handler))
