"""Suite driver enumerating planner variants against fixture queries."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence

from .clock import Clock, MonotonicClock
from .errors import ConfigurationError, PlantestError
from .models import DEFAULT_MAX_QUERIES, TimingSettings, Tolerance, TrialStatus
from .results import SuiteResult, TrialOutcome
from .session import PlanningSession, SessionBuilderManager, session_builders
from .verifier import AnytimeVerifier

if TYPE_CHECKING:
    from plantest.environment import Environment
    from plantest.planners.base import PlannerInstance, PlannerVariant
    from plantest.reporting.base import Reporter

logger = logging.getLogger(__name__)


class SuiteRunner:
    """Runs every (planner variant, query) trial exactly once, sequentially."""

    def __init__(
        self,
        environment: "Environment",
        *,
        timing: Optional[TimingSettings] = None,
        tolerance: Optional[Tolerance] = None,
        max_queries: int = DEFAULT_MAX_QUERIES,
        clock: Optional[Clock] = None,
        reporter: Optional["Reporter"] = None,
        builders: Optional[SessionBuilderManager] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        if max_queries < 1:
            raise ValueError(f"max_queries must be at least 1, got {max_queries}")
        self._environment = environment
        self._timing = timing or TimingSettings()
        self._tolerance = tolerance or Tolerance.for_obstacles(environment.obstacles)
        self._max_queries = max_queries
        self._reporter = reporter
        self._builders = builders if builders is not None else session_builders
        self._log = log or logger
        self._clock = clock or MonotonicClock()
        self._verifier = AnytimeVerifier(self._timing, self._tolerance, clock=self._clock, log=self._log)

    @property
    def query_indices(self) -> range:
        return range(min(self._max_queries, self._environment.query_count()))

    def run(self, variants: Sequence["PlannerVariant"]) -> SuiteResult:
        total = len(variants) * len(self.query_indices)
        if self._reporter is not None:
            self._reporter.on_start(variants, self.query_indices, self._timing)
        started = self._clock.now()
        outcomes: List[TrialOutcome] = []
        for variant in variants:
            for outcome in self._run_variant(variant):
                outcomes.append(outcome)
                if self._reporter is not None:
                    self._reporter.on_trial_result(outcome, len(outcomes), total)
        result = SuiteResult(outcomes=outcomes, duration_s=self._clock.now() - started)
        if self._reporter is not None:
            self._reporter.on_complete(result)
        return result

    def _run_variant(self, variant: "PlannerVariant") -> Iterator[TrialOutcome]:
        """Yield each outcome as soon as its trial finishes."""

        self._log.info("Testing %s ...", variant.name)
        session = self._build_session(variant)
        try:
            planner = variant.new_planner(session)
        except Exception as exc:
            self._log.exception("Could not create planner %s", variant.name)
            detail = f"planner construction failed: {exc}"
            for index in self.query_indices:
                yield self._error(variant.name, index, 0.0, detail)
            return
        for index in self.query_indices:
            yield self._run_trial(variant, planner, session, index)
        self._log.info("Done with %s.", variant.name)

    def _build_session(self, variant: "PlannerVariant") -> PlanningSession:
        builder = self._builders.get(variant.backend)
        try:
            return builder.build(self._environment.obstacles)
        except PlantestError:
            raise
        except Exception as exc:
            raise ConfigurationError(f"Unable to build {variant.backend} session for {variant.name}: {exc}") from exc

    def _run_trial(
        self,
        variant: "PlannerVariant",
        planner: "PlannerInstance",
        session: PlanningSession,
        index: int,
    ) -> TrialOutcome:
        start = self._clock.now()
        try:
            return self._verifier.verify(
                planner,
                session,
                self._environment.query(index),
                planner_name=variant.name,
                query_index=index,
            )
        except Exception as exc:
            self._log.warning("%s/query%d raised %s", variant.name, index, exc)
            return self._error(variant.name, index, self._clock.now() - start, str(exc) or type(exc).__name__)

    def _error(self, planner: str, index: int, duration: float, detail: str) -> TrialOutcome:
        return TrialOutcome(
            planner=planner,
            query_index=index,
            status=TrialStatus.ERROR,
            duration_s=duration,
            detail=detail,
        )
