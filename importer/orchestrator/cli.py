"""CLI entrypoint for the document importer."""

import argparse
import json
import logging
import sys
from typing import List, Optional

import setproctitle

from importer.doc.document import ImporterDocument
from importer.errors import ConfigurationError, ImporterHandlerError
from importer.orchestrator.core_processing import run_batch
from importer.orchestrator.log_config import setup_logging
from importer.utilities.config import (
    get_task_timeout,
    get_workers,
    load_importer_config,
)

logger = logging.getLogger(__name__)


def read_document(path: str) -> ImporterDocument:
    """Read a file as a document whose reference is its path."""
    with open(path, "rb") as handle:
        return ImporterDocument(path, handle.read())


def write_results(path: str, batch: dict) -> None:
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(batch, handle, indent=2, ensure_ascii=False)
    logger.info("Wrote results for %s document(s) to %s", len(batch["results"]), path)


def main(argv: Optional[List[str]] = None) -> None:
    """Parse CLI arguments and import the given files."""
    parser = argparse.ArgumentParser(
        description="Import documents through the configured handler pipeline"
    )
    parser.add_argument("files", nargs="+", help="Files to import")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Configuration JSON (default: $IMPORTER_CONFIG or config.json)",
    )
    parser.add_argument("--workers", type=int, default=None, help="Parallel workers")
    parser.add_argument(
        "--timeout", type=int, default=None, help="Seconds allowed per document"
    )
    parser.add_argument(
        "--output", type=str, default=None, help="Write per-document results as JSON"
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    setproctitle.setproctitle("docimporter")

    try:
        config = load_importer_config(args.config)
        workers = args.workers or get_workers(config)
        timeout = args.timeout or get_task_timeout()
        documents = [read_document(path) for path in args.files]
        batch = run_batch(documents, config, workers=workers, task_timeout=timeout)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        sys.exit(1)
    except ImporterHandlerError as exc:
        logger.error("Import aborted: %s", exc)
        sys.exit(1)
    except OSError as exc:
        logger.error("Cannot read input: %s", exc)
        sys.exit(1)

    if args.output:
        write_results(args.output, batch)

    sys.exit(0 if batch["stats"]["failed"] == 0 else 1)


if __name__ == "__main__":
    main()
