"""Result data structures produced by the verifier and the suite runner."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .models import FailureReason, TrialStatus


@dataclass
class TrialOutcome:
    """Outcome of one (planner variant, query) trial."""

    planner: str
    query_index: int
    status: TrialStatus
    duration_s: float
    reason: Optional[FailureReason] = None
    initial_length: Optional[float] = None
    final_length: Optional[float] = None
    lengths: Tuple[float, ...] = ()
    rounds: int = 0
    detail: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status is TrialStatus.PASSED

    def identifier(self) -> str:
        return f"{self.planner}/query{self.query_index}"

    def improvement(self) -> Optional[float]:
        if self.initial_length is None or self.final_length is None:
            return None
        return self.initial_length - self.final_length


@dataclass
class SuiteResult:
    """Aggregated outcomes for a whole suite run."""

    outcomes: List[TrialOutcome] = field(default_factory=list)
    duration_s: float = 0.0

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def passed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is TrialStatus.PASSED)

    @property
    def failed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is TrialStatus.FAILED)

    @property
    def error_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is TrialStatus.ERROR)

    @property
    def passed(self) -> bool:
        return bool(self.outcomes) and self.passed_count == self.total

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1

    def failures(self) -> Sequence[TrialOutcome]:
        return tuple(outcome for outcome in self.outcomes if not outcome.passed)
