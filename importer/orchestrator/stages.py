"""Stage tracking helpers for the per-document handler trace."""

from datetime import datetime, timezone
from typing import List, Optional, TypedDict


class StageInfo(TypedDict, total=False):
    """What happened when one handler met one document."""

    handler: str
    handler_type: str
    state: str  # skipped | applied
    at: str  # ISO 8601 timestamp
    elapsed_seconds: float
    error: Optional[str]
    # Handler-specific metadata (optional)
    rejected: Optional[bool]
    children_count: Optional[int]


def make_stage(
    handler: str,
    handler_type: str,
    state: str,
    error: Optional[str] = None,
    **metadata,
) -> StageInfo:
    """
    Create a stage info dict with timestamp.

    Args:
        handler: Handler name
        handler_type: tagger, filter or splitter
        state: skipped or applied
        error: Error message if the handler faulted
        **metadata: Additional stage-specific metadata (elapsed_seconds, ...)

    Returns:
        StageInfo dict with handler, state, timestamp, and any metadata
    """
    stage: StageInfo = {
        "handler": handler,
        "handler_type": handler_type,
        "state": state,
        "at": datetime.now(timezone.utc).isoformat(),
    }
    if error:
        stage["error"] = error
    for key, value in metadata.items():
        if value is not None:
            stage[key] = value  # type: ignore
    return stage


def applied_handlers(stages: List[StageInfo]) -> List[str]:
    """Names of the handlers that actually ran, in order."""
    return [stage["handler"] for stage in stages if stage.get("state") == "applied"]
