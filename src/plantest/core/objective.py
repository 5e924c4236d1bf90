"""Two-mode optimization objective shared by a session and its planner."""
from __future__ import annotations

import enum
import sys
from typing import Callable, Optional


class ObjectiveMode(enum.Enum):
    """When a planner may consider its current solution good enough."""

    ACCEPT_FIRST_FEASIBLE = "accept-first-feasible"
    OPTIMIZE_UNTIL_BUDGET = "optimize-until-budget"

    @property
    def cost_threshold(self) -> float:
        """Numeric cost threshold for backends that express the mode as a bound."""

        if self is ObjectiveMode.ACCEPT_FIRST_FEASIBLE:
            return float("inf")
        return sys.float_info.epsilon


ModeListener = Callable[[ObjectiveMode], None]


class OptimizationObjective:
    """Mutable handle whose mode changes are pushed to a bound backend."""

    def __init__(
        self,
        mode: ObjectiveMode = ObjectiveMode.ACCEPT_FIRST_FEASIBLE,
        *,
        listener: Optional[ModeListener] = None,
    ) -> None:
        self._mode = mode
        self._listener = listener
        if listener is not None:
            listener(mode)

    @property
    def mode(self) -> ObjectiveMode:
        return self._mode

    @mode.setter
    def mode(self, value: ObjectiveMode) -> None:
        if not isinstance(value, ObjectiveMode):
            raise TypeError(f"Expected ObjectiveMode, got {type(value).__name__}")
        self._mode = value
        if self._listener is not None:
            self._listener(value)

    def bind(self, listener: ModeListener) -> None:
        """Attach a backend listener and push the current mode to it."""

        self._listener = listener
        listener(self._mode)

    def accept_first_feasible(self) -> None:
        self.mode = ObjectiveMode.ACCEPT_FIRST_FEASIBLE

    def optimize_until_budget(self) -> None:
        self.mode = ObjectiveMode.OPTIMIZE_UNTIL_BUDGET

    @property
    def cost_threshold(self) -> float:
        return self._mode.cost_threshold

    def __repr__(self) -> str:
        return f"OptimizationObjective(mode={self._mode.value})"
