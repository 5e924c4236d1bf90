"""Reporter interface definitions."""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

from plantest.core.models import TimingSettings
from plantest.core.results import SuiteResult, TrialOutcome

if TYPE_CHECKING:
    from plantest.planners.base import PlannerVariant


class Reporter:
    """Interface for output renderers."""

    def on_start(
        self, variants: Sequence["PlannerVariant"], query_indices: Sequence[int], timing: TimingSettings
    ) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def on_trial_result(self, outcome: TrialOutcome, index: int, total: int) -> None:  # pragma: no cover
        raise NotImplementedError

    def on_complete(self, result: SuiteResult) -> None:  # pragma: no cover
        raise NotImplementedError


class ReportManager(Reporter):
    """Dispatches lifecycle callbacks to multiple reporters."""

    def __init__(self, reporters: Sequence[Reporter]) -> None:
        self._reporters = list(reporters)

    def on_start(
        self, variants: Sequence["PlannerVariant"], query_indices: Sequence[int], timing: TimingSettings
    ) -> None:
        for reporter in self._reporters:
            reporter.on_start(variants, query_indices, timing)

    def on_trial_result(self, outcome: TrialOutcome, index: int, total: int) -> None:
        for reporter in self._reporters:
            reporter.on_trial_result(outcome, index, total)

    def on_complete(self, result: SuiteResult) -> None:
        for reporter in self._reporters:
            reporter.on_complete(result)

    def reporters(self) -> List[Reporter]:
        return list(self._reporters)


class CollectingReporter(Reporter):
    """Keeps every callback in memory; handy for embedding the runner."""

    def __init__(self) -> None:
        self.started = False
        self.outcomes: List[TrialOutcome] = []
        self.result: SuiteResult | None = None

    def on_start(
        self, variants: Sequence["PlannerVariant"], query_indices: Sequence[int], timing: TimingSettings
    ) -> None:
        self.started = True
        self.outcomes.clear()
        self.result = None

    def on_trial_result(self, outcome: TrialOutcome, index: int, total: int) -> None:
        self.outcomes.append(outcome)

    def on_complete(self, result: SuiteResult) -> None:
        self.result = result
