"""Worker helpers: per-process pipeline context and the pool task wrapper."""

import logging
import os
import random
import time
from typing import Any, Dict, Optional

import psutil
import setproctitle

from importer.doc.document import ImporterDocument
from importer.errors import ImportCancelledError
from importer.orchestrator.driver import ImporterPipeline
from importer.orchestrator.log_config import setup_logging
from importer.utilities.config import build_pipeline, get_min_free_memory_mb
from importer.utilities.logging_utils import _log_context

logger = logging.getLogger(__name__)

# Global context for worker processes
_worker_context: Dict[str, Any] = {}

MEMORY_WAIT_TIMEOUT = 600


def _wait_for_available_memory(timeout: Optional[float] = None) -> Optional[str]:
    if timeout is None:
        timeout = MEMORY_WAIT_TIMEOUT
    required = get_min_free_memory_mb() * 1024 * 1024
    start_wait = time.time()
    while True:
        mem = psutil.virtual_memory()
        if mem.available >= required:
            return None
        if time.time() - start_wait > timeout:
            return "OOM Protection: Timeout waiting for memory"
        time.sleep(random.uniform(1, 5))


def init_worker(pipeline_config: Dict[str, Any], configure_logging: bool = True) -> None:
    """
    Build the pipeline for a worker process.
    This runs once when the worker starts; the configuration is only read.
    """
    if configure_logging:
        setup_logging()

    setproctitle.setproctitle(f"docimporter-worker-{os.getpid()}")
    logger.info("[Worker %s] Initializing pipeline...", os.getpid())

    pipeline = build_pipeline(pipeline_config)
    pipeline.setup()
    _worker_context["pipeline"] = pipeline

    logger.info("[Worker %s] Ready.", os.getpid())


def shutdown_worker() -> None:
    pipeline: Optional[ImporterPipeline] = _worker_context.pop("pipeline", None)
    if pipeline is not None:
        pipeline.teardown()


def import_document_wrapper(document: ImporterDocument) -> Dict[str, Any]:
    """
    Top-level wrapper to import a document with the worker's pipeline.

    Returns the serialised response, or a dict with an "error" key when the
    document could not be processed. ImporterHandlerError (abort policy)
    propagates to the caller.
    """
    pipeline: Optional[ImporterPipeline] = _worker_context.get("pipeline")

    memory_error = _wait_for_available_memory()
    if memory_error:
        return {"reference": document.reference, "error": memory_error}
    if pipeline is None:
        return {"reference": document.reference, "error": "Worker not initialized"}

    _log_context.doc_id = document.reference
    start = time.time()
    logger.info("[Worker %s] Importing: %s", os.getpid(), document.reference)

    try:
        response = pipeline.import_document(document)
    except ImportCancelledError as exc:
        logger.warning("  ✗ %s", exc)
        return {"reference": document.reference, "error": str(exc)}
    finally:
        _log_context.doc_id = None

    result = response.to_dict()
    result["outputs"] = [doc.reference for doc in response.outputs()]
    result["elapsed_seconds"] = round(time.time() - start, 3)
    return result
