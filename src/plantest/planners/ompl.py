"""OMPL-backed geometry service, planning session and planner variants.

The OMPL Python bindings are imported on first use so that the harness, and
any plugin variants, work without them; requesting an OMPL session or planner
without the bindings raises :class:`ConfigurationError`.
"""
from __future__ import annotations

import importlib
import logging
from typing import Any, Callable, Optional, Tuple

from plantest.core.errors import ConfigurationError
from plantest.core.objective import ObjectiveMode, OptimizationObjective
from plantest.core.session import PlanningSession, SessionBuilder, session_builders
from plantest.environment import ObstacleSet, Query

from .base import PlannerVariant, planner_registry

logger = logging.getLogger(__name__)

BACKEND = "ompl"
# Motion validation step as a fraction of the state space extent.
CHECK_RESOLUTION = 0.005


def import_ompl() -> Tuple[Any, Any]:
    """Return the ``ompl.base`` and ``ompl.geometric`` modules."""

    try:
        base = importlib.import_module("ompl.base")
        geometric = importlib.import_module("ompl.geometric")
    except ImportError as exc:
        raise ConfigurationError(
            "OMPL Python bindings are not installed; install plantest[ompl] to use OMPL planners"
        ) from exc
    return base, geometric


def build_space_information(obstacles: ObstacleSet) -> Tuple[Any, Callable[[Any], bool]]:
    """Build a 2D ``SpaceInformation`` whose free space excludes every circle.

    The validity callback is returned alongside so the caller can keep it alive
    for as long as OMPL may invoke it.
    """

    ob, _ = import_ompl()
    bounds = obstacles.bounds()
    if bounds.is_degenerate():
        raise ConfigurationError(f"Degenerate planning domain: {bounds}")
    space = ob.RealVectorStateSpace(2)
    limits = ob.RealVectorBounds(2)
    limits.setLow(0, bounds.min_x)
    limits.setHigh(0, bounds.max_x)
    limits.setLow(1, bounds.min_y)
    limits.setHigh(1, bounds.max_y)
    space.setBounds(limits)

    def is_valid(state: Any) -> bool:
        return obstacles.is_free(state[0], state[1])

    space_information = ob.SpaceInformation(space)
    space_information.setStateValidityChecker(ob.StateValidityCheckerFn(is_valid))
    space_information.setStateValidityCheckingResolution(CHECK_RESOLUTION)
    space_information.setup()
    return space_information, is_valid


class OmplSession(PlanningSession):
    """Session holding an OMPL problem definition and path-length objective."""

    backend = BACKEND

    def __init__(self, obstacles: ObstacleSet) -> None:
        self._ob, _ = import_ompl()
        self.space_information, self._validity_fn = build_space_information(obstacles)
        self.problem = self._ob.ProblemDefinition(self.space_information)
        self._path_objective = self._ob.PathLengthOptimizationObjective(self.space_information)
        self.problem.setOptimizationObjective(self._path_objective)
        super().__init__(obstacles, OptimizationObjective(listener=self._apply_mode))

    def _apply_mode(self, mode: ObjectiveMode) -> None:
        self._path_objective.setCostThreshold(self._ob.Cost(mode.cost_threshold))

    def _bind_query(self, query: Query) -> None:
        space = self.space_information.getStateSpace()
        start = self._ob.State(space)
        goal = self._ob.State(space)
        start[0], start[1] = query.start
        goal[0], goal[1] = query.goal
        self.problem.setStartAndGoalStates(start, goal, query.tolerance)

    def _clear_solution(self) -> None:
        self.problem.clearSolutionPaths()

    def _solution_length(self) -> Optional[float]:
        if not self.problem.hasSolution():
            return None
        return float(self.problem.getSolutionPath().length())


class OmplSessionBuilder(SessionBuilder):
    backend = BACKEND

    def build(self, obstacles: ObstacleSet) -> OmplSession:
        try:
            return OmplSession(obstacles)
        except ConfigurationError:
            raise
        except Exception as exc:
            raise ConfigurationError(f"Unable to construct OMPL planning session: {exc}") from exc


class OmplPlanner:
    """Adapter exposing an OMPL planner through the planner-instance protocol."""

    def __init__(self, name: str, planner: Any) -> None:
        self.name = name
        self._planner = planner

    @property
    def ompl_planner(self) -> Any:
        return self._planner

    def setup(self) -> None:
        self._planner.setup()

    def solve(self, time_budget: float) -> bool:
        return bool(self._planner.solve(float(time_budget)))

    def clear(self) -> None:
        self._planner.clear()


class OmplPlannerVariant(PlannerVariant):
    """Variant instantiating ``ompl.geometric.<algorithm>``."""

    backend = BACKEND
    algorithm = ""

    def new_planner(self, session: PlanningSession) -> OmplPlanner:
        if not isinstance(session, OmplSession):
            raise ConfigurationError(f"{self.name} needs an OMPL session, got {type(session).__name__}")
        _, og = import_ompl()
        factory = getattr(og, self.algorithm, None)
        if factory is None:
            raise ConfigurationError(f"ompl.geometric has no planner named '{self.algorithm}'")
        planner = factory(session.space_information)
        planner.setProblemDefinition(session.problem)
        instance = OmplPlanner(self.name, planner)
        instance.setup()
        logger.debug("Created %s bound to %r", self.algorithm, session)
        return instance


class RRTstarVariant(OmplPlannerVariant):
    name = "RRTstar"
    algorithm = "RRTstar"
    description = "Asymptotically optimal tree-growth planner (OMPL RRT*)."


class PRMstarVariant(OmplPlannerVariant):
    name = "PRMstar"
    algorithm = "PRMstar"
    description = "Asymptotically optimal roadmap planner (OMPL PRM*)."


BUILTIN_VARIANTS = (RRTstarVariant, PRMstarVariant)


def register() -> None:
    """Register the OMPL session builder and the built-in variants."""

    session_builders.register(OmplSessionBuilder(), replace=True)
    for variant_cls in BUILTIN_VARIANTS:
        planner_registry.update_or_register(variant_cls())
