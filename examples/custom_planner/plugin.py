"""Planner plugin with an in-memory session, loaded through a suite file.

``ShrinkingPlanner`` shortens its path by a constant factor on every
optimizing call; ``StallingPlanner`` never improves and is expected to fail
with ``no-improvement``.
"""
from __future__ import annotations

import time

from plantest.core import ObjectiveMode, PlanningSession, SessionBuilder, session_builders
from plantest.planners import PlannerVariant, planner_registry

BACKEND = "inmemory"


class InMemorySession(PlanningSession):
    backend = BACKEND

    def __init__(self, obstacles) -> None:
        super().__init__(obstacles)
        self.length = None

    def _bind_query(self, query) -> None:
        start, goal = query.start, query.goal
        self.straight_line = ((goal[0] - start[0]) ** 2 + (goal[1] - start[1]) ** 2) ** 0.5

    def _clear_solution(self) -> None:
        self.length = None

    def _solution_length(self):
        return self.length


class InMemorySessionBuilder(SessionBuilder):
    backend = BACKEND

    def build(self, obstacles) -> InMemorySession:
        return InMemorySession(obstacles)


class ShrinkingPlanner:
    def __init__(self, session: InMemorySession, name: str, factor: float) -> None:
        self.name = name
        self.session = session
        self.factor = factor
        self.best = None

    def setup(self) -> None:
        self.best = None

    def clear(self) -> None:
        self.best = None

    def solve(self, time_budget: float) -> bool:
        if self.best is None:
            self.best = 2.0 * self.session.straight_line
        elif self.session.objective.mode is ObjectiveMode.OPTIMIZE_UNTIL_BUDGET:
            # Optimizing calls use their whole slice, like a real anytime planner.
            time.sleep(time_budget)
            self.best = max(self.session.straight_line, self.best * self.factor)
        self.session.length = self.best
        return True


class ShrinkingVariant(PlannerVariant):
    backend = BACKEND

    def __init__(self, name: str, factor: float, description: str) -> None:
        self.name = name
        self.factor = factor
        self.description = description

    def new_planner(self, session: PlanningSession) -> ShrinkingPlanner:
        planner = ShrinkingPlanner(session, self.name, self.factor)
        planner.setup()
        return planner


def register() -> None:
    session_builders.register(InMemorySessionBuilder(), replace=True)
    planner_registry.update_or_register(
        ShrinkingVariant("ShrinkingPlanner", 0.9, "shortens its path by 10% per slice")
    )
    planner_registry.update_or_register(ShrinkingVariant("StallingPlanner", 1.0, "never improves its path"))
