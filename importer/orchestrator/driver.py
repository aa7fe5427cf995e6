"""
driver.py - Runs one document through the configured handler chain.

Per document:
    PENDING -> (for each handler) RESTRICTION_CHECK -> SKIPPED | APPLIED
            -> ... -> ACCEPTED | REJECTED

- Taggers mutate the document.
- Filter decisions are combined under the filter policy; a terminal reject
  stops the chain.
- A splitter replaces the document with its children. With
  SplitPolicy.CONTINUE each child runs the rest of the chain; with
  SplitPolicy.TERMINAL the children are returned as they are. A split parent
  is REJECTED when every child is rejected, ACCEPTED otherwise.
- A handler fault becomes a rejection (FaultPolicy.REJECT) or aborts the
  caller with ImporterHandlerError (FaultPolicy.ABORT).
"""

import logging
import time
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from importer.doc.document import ImporterDocument
from importer.errors import (
    ConfigurationError,
    ImportCancelledError,
    ImporterHandlerError,
)
from importer.handlers.base import FILTER, SPLITTER, TAGGER, BaseHandler
from importer.handlers.decisions import (
    FilterDecision,
    FilterDecisionTracker,
    FilterPolicy,
)
from importer.handlers.registry import build_handlers
from importer.orchestrator.stages import StageInfo, make_stage
from importer.utilities.logging_utils import _log_context

logger = logging.getLogger(__name__)


class ImporterState(str, Enum):
    PENDING = "pending"
    RESTRICTION_CHECK = "restriction_check"
    SKIPPED = "skipped"
    APPLIED = "applied"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class FaultPolicy(str, Enum):
    """What a handler exception does to the document and the batch."""

    REJECT = "reject"  # reject the document, reason = the fault
    ABORT = "abort"  # raise ImporterHandlerError, stopping the batch


class SplitPolicy(str, Enum):
    """What happens to split children."""

    CONTINUE = "continue"  # children run the remaining handlers
    TERMINAL = "terminal"  # children are final outputs


def _coerce_policy(enum_cls, value, key: str):
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = [member.value for member in enum_cls]
        raise ConfigurationError(f"'{key}' must be one of {allowed}, got {value!r}") from exc


class ImporterResponse:
    """Outcome of importing one document (and of its split children)."""

    def __init__(self, document: ImporterDocument):
        self.reference = document.reference
        self.document = document
        self.state = ImporterState.PENDING
        self.decision: Optional[FilterDecision] = None
        self.children: List["ImporterResponse"] = []
        self.stages: List[StageInfo] = []

    @property
    def is_accepted(self) -> bool:
        return self.state is ImporterState.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.state is ImporterState.REJECTED

    @property
    def was_split(self) -> bool:
        return any(
            stage.get("handler_type") == SPLITTER and "children_count" in stage
            for stage in self.stages
        )

    def outputs(self) -> List[ImporterDocument]:
        """Accepted leaf documents, in order."""
        if not self.is_accepted:
            return []
        if self.was_split:
            docs: List[ImporterDocument] = []
            for child in self.children:
                docs.extend(child.outputs())
            return docs
        return [self.document]

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "reference": self.reference,
            "state": self.state.value,
            "metadata": self.document.metadata.to_dict(),
            "content_length": len(self.document.content),
            "stages": list(self.stages),
        }
        if self.decision is not None and self.decision.is_rejected:
            result["rejected_by"] = self.decision.filter_name
            result["rejection"] = self.decision.description
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result

    def __repr__(self) -> str:
        return f"ImporterResponse({self.reference!r}, {self.state.value})"


class ImporterPipeline:
    """
    Ordered chain of handlers with explicit filter, fault and split policies.

    Handlers and policies are fixed at construction and only read afterwards,
    so one pipeline may serve many documents, one at a time per thread.
    """

    def __init__(
        self,
        handlers: Iterable[BaseHandler],
        filter_policy: FilterPolicy = FilterPolicy.ALL,
        fault_policy: FaultPolicy = FaultPolicy.REJECT,
        split_policy: SplitPolicy = SplitPolicy.CONTINUE,
    ):
        self.handlers = tuple(handlers)
        for handler in self.handlers:
            if not isinstance(handler, BaseHandler) or handler.handler_type not in (
                TAGGER,
                FILTER,
                SPLITTER,
            ):
                raise ConfigurationError(f"Not a tagger, filter or splitter: {handler!r}")
        self.filter_policy = _coerce_policy(FilterPolicy, filter_policy, "filter_policy")
        self.fault_policy = _coerce_policy(FaultPolicy, fault_policy, "on_error")
        self.split_policy = _coerce_policy(SplitPolicy, split_policy, "split_policy")
        logger.info(
            "Importer pipeline assembled: %d handlers %s "
            "(filter_policy=%s, on_error=%s, split_policy=%s)",
            len(self.handlers),
            [handler.name for handler in self.handlers],
            self.filter_policy.value,
            self.fault_policy.value,
            self.split_policy.value,
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ImporterPipeline":
        """Build from the "importer" configuration section."""
        return cls(
            build_handlers(config.get("handlers") or []),
            filter_policy=config.get("filter_policy", FilterPolicy.ALL.value),
            fault_policy=config.get("on_error", FaultPolicy.REJECT.value),
            split_policy=config.get("split_policy", SplitPolicy.CONTINUE.value),
        )

    def setup(self) -> None:
        for handler in self.handlers:
            handler.ensure_setup()

    def teardown(self) -> None:
        for handler in self.handlers:
            handler.teardown()

    def __enter__(self):
        self.setup()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.teardown()
        return False

    def import_document(
        self,
        document: ImporterDocument,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> ImporterResponse:
        """
        Run the handler chain on a document.

        Args:
            document: Document to process; it is mutated in place by taggers
            should_cancel: Optional callable checked after every handler;
                returning True raises ImportCancelledError

        Returns:
            ImporterResponse with the terminal state and split children
        """
        previous_doc_id = getattr(_log_context, "doc_id", None)
        _log_context.doc_id = document.reference
        try:
            tracker = FilterDecisionTracker(self.filter_policy)
            return self._run_chain(document, 0, tracker, should_cancel)
        finally:
            _log_context.doc_id = previous_doc_id

    def _run_chain(
        self,
        document: ImporterDocument,
        start: int,
        tracker: FilterDecisionTracker,
        should_cancel: Optional[Callable[[], bool]],
    ) -> ImporterResponse:
        response = ImporterResponse(document)

        for index in range(start, len(self.handlers)):
            handler = self.handlers[index]
            response.state = ImporterState.RESTRICTION_CHECK

            if not handler.is_applicable(document.metadata):
                response.stages.append(
                    make_stage(handler.name, handler.handler_type, ImporterState.SKIPPED.value)
                )
                logger.debug("  - %s skipped (restrictions): %s", handler.name, document.reference)
                self._check_cancelled(document, handler, should_cancel)
                continue

            stage_start = time.time()
            try:
                outcome = self._apply(handler, document)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                decision = self._handle_fault(handler, document, exc)
                response.stages.append(
                    make_stage(
                        handler.name,
                        handler.handler_type,
                        ImporterState.APPLIED.value,
                        error=str(exc) or exc.__class__.__name__,
                        elapsed_seconds=round(time.time() - stage_start, 3),
                    )
                )
                return self._finish(response, ImporterState.REJECTED, decision)

            elapsed = round(time.time() - stage_start, 3)

            if handler.handler_type == FILTER:
                response.stages.append(
                    make_stage(
                        handler.name,
                        handler.handler_type,
                        ImporterState.APPLIED.value,
                        elapsed_seconds=elapsed,
                        rejected=outcome.is_rejected,
                    )
                )
                terminal = tracker.add(outcome)
                if terminal is not None:
                    return self._finish(response, ImporterState.REJECTED, terminal)

            elif handler.handler_type == SPLITTER:
                response.stages.append(
                    make_stage(
                        handler.name,
                        handler.handler_type,
                        ImporterState.APPLIED.value,
                        elapsed_seconds=elapsed,
                        children_count=len(outcome),
                    )
                )
                self._check_cancelled(document, handler, should_cancel)
                return self._split(response, outcome, index + 1, tracker, should_cancel)

            else:
                response.stages.append(
                    make_stage(
                        handler.name,
                        handler.handler_type,
                        ImporterState.APPLIED.value,
                        elapsed_seconds=elapsed,
                    )
                )

            self._check_cancelled(document, handler, should_cancel)

        decision = tracker.resolve()
        if decision.is_rejected:
            return self._finish(response, ImporterState.REJECTED, decision)
        return self._finish(response, ImporterState.ACCEPTED, None)

    @staticmethod
    def _apply(handler: BaseHandler, document: ImporterDocument) -> Any:
        handler.ensure_setup()
        if handler.handler_type == TAGGER:
            handler.tag_document(document)
            return None
        if handler.handler_type == FILTER:
            decision = handler.filter_document(document)
            if not isinstance(decision, FilterDecision):
                raise TypeError(
                    f"{handler.name} returned {type(decision).__name__}, expected FilterDecision"
                )
            return decision
        return list(handler.split_document(document))

    def _split(
        self,
        response: ImporterResponse,
        children: List[ImporterDocument],
        next_index: int,
        tracker: FilterDecisionTracker,
        should_cancel: Optional[Callable[[], bool]],
    ) -> ImporterResponse:
        logger.info(
            "Split %s into %d document(s) (split_policy=%s)",
            response.reference,
            len(children),
            self.split_policy.value,
        )
        if self.split_policy is SplitPolicy.TERMINAL:
            decision = tracker.resolve()
            if decision.is_rejected:
                return self._finish(response, ImporterState.REJECTED, decision)
            for child in children:
                child_response = ImporterResponse(child)
                response.children.append(
                    self._finish(child_response, ImporterState.ACCEPTED, None)
                )
        else:
            for child in children:
                _log_context.doc_id = child.reference
                try:
                    response.children.append(
                        self._run_chain(child, next_index, tracker.copy(), should_cancel)
                    )
                finally:
                    _log_context.doc_id = response.reference
            rejected = [child for child in response.children if child.is_rejected]
            if rejected and len(rejected) == len(response.children):
                # no child made it, the parent carries the first child's reason
                first = rejected[0].decision
                return self._finish(
                    response,
                    ImporterState.REJECTED,
                    FilterDecision(
                        first.filter,
                        f"All {len(rejected)} split document(s) rejected: {first.description}",
                    ),
                )
        return self._finish(response, ImporterState.ACCEPTED, None)

    def _handle_fault(
        self, handler: BaseHandler, document: ImporterDocument, exc: Exception
    ) -> FilterDecision:
        if self.fault_policy is FaultPolicy.ABORT:
            logger.error(
                "  ✗ %s failed on %s, aborting: %s", handler.name, document.reference, exc
            )
            raise ImporterHandlerError(handler.name, document.reference, str(exc)) from exc
        logger.error(
            "  ✗ %s failed on %s, rejecting document: %s",
            handler.name,
            document.reference,
            exc,
        )
        return FilterDecision.rejected(
            handler, f"Handler fault in {handler.name}: {exc.__class__.__name__}: {exc}"
        )

    @staticmethod
    def _check_cancelled(
        document: ImporterDocument,
        handler: BaseHandler,
        should_cancel: Optional[Callable[[], bool]],
    ) -> None:
        if should_cancel is not None and should_cancel():
            logger.warning("Import of %s cancelled after %s", document.reference, handler.name)
            raise ImportCancelledError(document.reference, handler.name)

    @staticmethod
    def _finish(
        response: ImporterResponse,
        state: ImporterState,
        decision: Optional[FilterDecision],
    ) -> ImporterResponse:
        response.state = state
        response.decision = decision
        if state is ImporterState.REJECTED and decision is not None:
            logger.info(
                "  ✗ Rejected %s by %s: %s",
                response.reference,
                decision.filter_name or "-",
                decision.description,
            )
        else:
            logger.debug("  ✓ %s %s", state.value.capitalize(), response.reference)
        return response
