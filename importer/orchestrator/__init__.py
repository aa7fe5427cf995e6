"""Importer orchestrator public exports."""

from importer.orchestrator.core_processing import run_batch
from importer.orchestrator.driver import (
    FaultPolicy,
    ImporterPipeline,
    ImporterResponse,
    ImporterState,
    SplitPolicy,
)
from importer.orchestrator.worker import (
    _worker_context,
    import_document_wrapper,
    init_worker,
)

__all__ = [
    "FaultPolicy",
    "ImporterPipeline",
    "ImporterResponse",
    "ImporterState",
    "SplitPolicy",
    "_worker_context",
    "import_document_wrapper",
    "init_worker",
    "run_batch",
]
