"""Two-phase anytime-improvement protocol run for every trial.

A trial binds one query to a session, asks the planner for a first feasible
path using the whole per-query budget, then keeps calling ``solve`` in short
slices with the objective set to optimize until each slice expires. The
observed path lengths must never increase (within tolerance) and must end
strictly below the first length.
"""
from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, List, Optional

from .clock import Clock, MonotonicClock
from .errors import SolveFailure
from .models import FailureReason, Tolerance, TimingSettings, TrialStatus
from .objective import ObjectiveMode
from .results import TrialOutcome
from .session import PlanningSession

if TYPE_CHECKING:
    from plantest.environment import Query
    from plantest.planners.base import PlannerInstance

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    INIT = "init"
    FIRST_SOLVE = "first-solve"
    IMPROVING = "improving"
    DONE = "done"


class _Trial:
    """Mutable bookkeeping for one verification run."""

    def __init__(self, planner_name: str, query_index: int) -> None:
        self.planner_name = planner_name
        self.query_index = query_index
        self.phase = Phase.INIT
        self.lengths: List[float] = []
        self.rounds = 0
        self.start: Optional[float] = None

    @property
    def initial_length(self) -> Optional[float]:
        return self.lengths[0] if self.lengths else None

    @property
    def last_length(self) -> Optional[float]:
        return self.lengths[-1] if self.lengths else None


class AnytimeVerifier:
    """Drives a planner through first-solution and continued-optimization modes."""

    def __init__(
        self,
        timing: Optional[TimingSettings] = None,
        tolerance: Optional[Tolerance] = None,
        *,
        clock: Optional[Clock] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._timing = timing or TimingSettings()
        self._tolerance = tolerance or Tolerance()
        self._clock = clock or MonotonicClock()
        self._log = log or logger

    @property
    def timing(self) -> TimingSettings:
        return self._timing

    @property
    def tolerance(self) -> Tolerance:
        return self._tolerance

    def verify(
        self,
        planner: "PlannerInstance",
        session: PlanningSession,
        query: "Query",
        *,
        planner_name: Optional[str] = None,
        query_index: int = 0,
    ) -> TrialOutcome:
        trial = _Trial(planner_name or getattr(planner, "name", type(planner).__name__), query_index)
        try:
            self._initialize(trial, planner, session, query)
            self._first_solve(trial, planner, session)
            self._improve(trial, planner, session)
            self._conclude(trial)
        except SolveFailure as failure:
            self._transition(trial, Phase.DONE)
            self._log.info("%s/query%d failed: %s", trial.planner_name, query_index, failure.detail)
            return self._outcome(trial, TrialStatus.FAILED, failure.reason, failure.detail)
        self._transition(trial, Phase.DONE)
        return self._outcome(trial, TrialStatus.PASSED)

    def _initialize(
        self, trial: _Trial, planner: "PlannerInstance", session: PlanningSession, query: "Query"
    ) -> None:
        session.set_query(query)
        planner.clear()

    def _first_solve(self, trial: _Trial, planner: "PlannerInstance", session: PlanningSession) -> None:
        self._transition(trial, Phase.FIRST_SOLVE)
        session.objective.mode = ObjectiveMode.ACCEPT_FIRST_FEASIBLE
        trial.start = self._clock.now()
        solved = self._timed_solve(trial, planner, self._timing.total)
        if not solved or not session.has_solution():
            raise SolveFailure(
                FailureReason.NO_INITIAL_SOLUTION,
                f"no solution within {self._timing.total:g}s in first-solution mode",
            )
        trial.lengths.append(session.solution_length())
        self._log.debug("%s/query%d initial length %.6f", trial.planner_name, trial.query_index, trial.lengths[0])

    def _improve(self, trial: _Trial, planner: "PlannerInstance", session: PlanningSession) -> None:
        self._transition(trial, Phase.IMPROVING)
        step = self._timing.slice
        while self._elapsed(trial) + step < self._timing.total:
            session.clear_solution()
            session.objective.mode = ObjectiveMode.OPTIMIZE_UNTIL_BUDGET
            solved = self._timed_solve(trial, planner, step)
            trial.rounds += 1
            if not solved or not session.has_solution():
                raise SolveFailure(
                    FailureReason.SLICE_SOLVE_FAILED,
                    f"slice {trial.rounds} returned no solution after one was already found",
                )
            previous = trial.last_length
            current = session.solution_length()
            trial.lengths.append(current)
            if not self._tolerance.allows(previous, current):
                raise SolveFailure(
                    FailureReason.NON_MONOTONIC_REGRESSION,
                    f"slice {trial.rounds} length {current:.6f} exceeds previous {previous:.6f}",
                )

    def _conclude(self, trial: _Trial) -> None:
        initial, final = trial.initial_length, trial.last_length
        if not final < initial:
            raise SolveFailure(
                FailureReason.NO_IMPROVEMENT,
                f"length stayed at {final:.6f} after {trial.rounds} improvement round(s)",
            )

    def _timed_solve(self, trial: _Trial, planner: "PlannerInstance", bound: float) -> bool:
        started = self._clock.now()
        solved = bool(planner.solve(bound))
        measured = self._clock.now() - started
        if self._timing.exceeded(bound, measured):
            raise SolveFailure(
                FailureReason.TIMEOUT,
                f"solve({bound:g}) returned after {measured:.3f}s in phase {trial.phase.value}",
            )
        return solved

    def _elapsed(self, trial: _Trial) -> float:
        return self._clock.now() - trial.start

    def _transition(self, trial: _Trial, phase: Phase) -> None:
        self._log.debug("%s/query%d: %s -> %s", trial.planner_name, trial.query_index, trial.phase.value, phase.value)
        trial.phase = phase

    def _outcome(
        self,
        trial: _Trial,
        status: TrialStatus,
        reason: Optional[FailureReason] = None,
        detail: Optional[str] = None,
    ) -> TrialOutcome:
        duration = self._elapsed(trial) if trial.start is not None else 0.0
        return TrialOutcome(
            planner=trial.planner_name,
            query_index=trial.query_index,
            status=status,
            duration_s=duration,
            reason=reason,
            initial_length=trial.initial_length,
            final_length=trial.last_length,
            lengths=tuple(trial.lengths),
            rounds=trial.rounds,
            detail=detail,
        )
