"""Batch import over a sequential loop or a multiprocessing pool."""

import logging
import multiprocessing
from typing import Any, Dict, Iterable, List

from importer.doc.document import ImporterDocument
from importer.errors import ConfigurationError, ImporterHandlerError
from importer.orchestrator.worker import (
    import_document_wrapper,
    init_worker,
    shutdown_worker,
)
from importer.utilities.config import DEFAULT_TASK_TIMEOUT
from importer.utilities.config_validator import validate_importer_config

logger = logging.getLogger(__name__)

FAILED = "failed"


def run_batch(
    documents: Iterable[ImporterDocument],
    pipeline_config: Dict[str, Any],
    workers: int = 1,
    task_timeout: int = DEFAULT_TASK_TIMEOUT,
) -> Dict[str, Any]:
    """
    Import a batch of documents.

    Args:
        documents: Documents to import
        pipeline_config: Full configuration dict; each worker builds its own
            pipeline from it
        workers: Parallel worker processes (1 = run in this process)
        task_timeout: Seconds to wait for one document in parallel mode

    Returns:
        {"stats": {processed, accepted, rejected, failed}, "results": [...]},
        results in input order

    Raises:
        ConfigurationError: invalid configuration, before any document runs
        ImporterHandlerError: a handler fault under the abort policy
    """
    errors = validate_importer_config(pipeline_config)
    if errors:
        raise ConfigurationError("Invalid importer configuration: " + "; ".join(errors))

    documents = list(documents)
    stats = {"processed": 0, "accepted": 0, "rejected": 0, FAILED: 0}
    results: List[Dict[str, Any]] = []

    logger.info("STEP: Import (%s documents)", len(documents))
    logger.info("=" * 60)

    if not documents:
        logger.info("No documents to import.")
        return {"stats": stats, "results": results}

    if workers > 1:
        _import_docs_parallel(documents, pipeline_config, workers, task_timeout, stats, results)
    else:
        _import_docs_sequential(documents, pipeline_config, stats, results)

    logger.info(
        "\n✅ Import complete: %s accepted, %s rejected, %s failed (%s processed)",
        stats["accepted"],
        stats["rejected"],
        stats[FAILED],
        stats["processed"],
    )
    return {"stats": stats, "results": results}


def _failed_result(reference: str, reason: str) -> Dict[str, Any]:
    return {"reference": reference, "state": FAILED, "error": reason}


def _record_result(
    result: Dict[str, Any], stats: Dict[str, int], results: List[Dict[str, Any]]
) -> None:
    stats["processed"] += 1
    if "error" in result:
        result.setdefault("state", FAILED)
        stats[FAILED] += 1
    elif result.get("state") == "accepted":
        stats["accepted"] += 1
    else:
        stats["rejected"] += 1
    results.append(result)


def _import_docs_parallel(
    documents: List[ImporterDocument],
    pipeline_config: Dict[str, Any],
    workers: int,
    task_timeout: int,
    stats: Dict[str, int],
    results: List[Dict[str, Any]],
) -> None:
    logger.info("Using %s parallel workers (multiprocessing.Pool)", workers)
    ctx = multiprocessing.get_context("spawn")

    with ctx.Pool(
        processes=workers,
        initializer=init_worker,
        initargs=(pipeline_config,),
    ) as pool:
        pending = [
            (doc.reference, pool.apply_async(import_document_wrapper, (doc,)))
            for doc in documents
        ]
        logger.info("Submitted %s tasks to pool...", len(pending))

        for reference, res in pending:
            try:
                result = res.get(timeout=task_timeout)
            except ImporterHandlerError as exc:
                logger.error("❌ Aborting batch: %s", exc)
                pool.terminate()
                raise
            except (multiprocessing.context.TimeoutError, TimeoutError):
                logger.error(
                    "❌ Worker timed out or hung importing %s (possible OOM)", reference
                )
                result = _failed_result(reference, "Worker Timeout/OOM")
            except (OSError, RuntimeError, ValueError) as exc:
                logger.error("❌ Worker crashed importing %s: %s", reference, exc)
                result = _failed_result(reference, f"Worker Crash: {exc}")
            _record_result(result, stats, results)


def _import_docs_sequential(
    documents: List[ImporterDocument],
    pipeline_config: Dict[str, Any],
    stats: Dict[str, int],
    results: List[Dict[str, Any]],
) -> None:
    logger.info("Running sequentially (1 worker)")
    init_worker(pipeline_config, configure_logging=False)
    try:
        for doc in documents:
            try:
                result = import_document_wrapper(doc)
            except ImporterHandlerError as exc:
                logger.error("❌ Aborting batch: %s", exc)
                raise
            except (OSError, RuntimeError, ValueError) as exc:
                logger.error("Error importing %s: %s", doc.reference, exc)
                result = _failed_result(doc.reference, f"Worker Crash: {exc}")
            _record_result(result, stats, results)
    finally:
        shutdown_worker()
