"""
decisions.py - Accept/reject outcomes of filter handlers.

A decision is rejected iff it carries a description. The tracker combines the
decisions of a chain of filters under the configured policy.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


class FilterPolicy(str, Enum):
    """How decisions of several filters combine."""

    ALL = "all"  # every applied filter must accept; first reject is final
    ANY = "any"  # one accepting filter is enough


@dataclass(frozen=True)
class FilterDecision:
    """Outcome of one filter, or of a fault converted into a rejection."""

    filter: Optional[Any] = None
    description: Optional[str] = None

    @property
    def is_rejected(self) -> bool:
        return self.description is not None

    @property
    def filter_name(self) -> Optional[str]:
        if self.filter is None:
            return None
        return getattr(self.filter, "name", self.filter.__class__.__name__)

    @classmethod
    def accepted(cls) -> "FilterDecision":
        return cls()

    @classmethod
    def rejected(
        cls, filter: Optional[Any] = None, description: Optional[str] = None
    ) -> "FilterDecision":
        """Reject, describing the filter itself when no reason is given."""
        if description is None:
            if filter is None:
                raise ValueError("A rejection needs a filter or a description")
            description = str(filter)
        return cls(filter, description)


class FilterDecisionTracker:
    """
    Aggregates filter decisions while the driver walks a handler chain.

    With ALL, add() returns the first rejection so the driver can stop.
    With ANY, rejections are held until resolve(); one acceptance clears them.
    """

    def __init__(self, policy: FilterPolicy = FilterPolicy.ALL):
        self.policy = FilterPolicy(policy)
        self._rejections: List[FilterDecision] = []
        self._accepted = False

    def add(self, decision: FilterDecision) -> Optional[FilterDecision]:
        """Record a decision; return it when it ends the chain."""
        if not decision.is_rejected:
            self._accepted = True
            return None
        if self.policy is FilterPolicy.ALL:
            self._rejections.append(decision)
            return decision
        if not self._accepted:
            self._rejections.append(decision)
        return None

    def resolve(self) -> FilterDecision:
        """Final decision once no more filters will run."""
        if not self._rejections:
            return FilterDecision.accepted()
        if self.policy is FilterPolicy.ALL:
            return self._rejections[0]
        if self._accepted:
            return FilterDecision.accepted()
        first = self._rejections[0]
        if len(self._rejections) == 1:
            return first
        reasons = "; ".join(decision.description for decision in self._rejections)
        return FilterDecision(first.filter, reasons)

    def copy(self) -> "FilterDecisionTracker":
        clone = FilterDecisionTracker(self.policy)
        clone._rejections = list(self._rejections)
        clone._accepted = self._accepted
        return clone
