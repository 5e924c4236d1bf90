"""Planning session abstractions and the per-backend builder registry."""
from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, Optional

from .errors import ConfigurationError
from .objective import ObjectiveMode, OptimizationObjective

if TYPE_CHECKING:
    from plantest.environment import ObstacleSet, Query


class PlanningSession:
    """Couples an obstacle set to a geometry backend and a problem descriptor.

    Subclasses own the backend objects (space information, problem definition)
    and implement the ``_bind_query``/``_clear_solution``/``_solution_length``
    hooks. The objective starts in first-solution mode.
    """

    backend: str = ""

    def __init__(self, obstacles: "ObstacleSet", objective: Optional[OptimizationObjective] = None) -> None:
        self._obstacles = obstacles
        self._objective = objective or OptimizationObjective(ObjectiveMode.ACCEPT_FIRST_FEASIBLE)
        self._query: Optional["Query"] = None

    @property
    def obstacles(self) -> "ObstacleSet":
        return self._obstacles

    @property
    def objective(self) -> OptimizationObjective:
        return self._objective

    @property
    def query(self) -> Optional["Query"]:
        return self._query

    def set_query(self, query: "Query") -> None:
        """Rebind start and goal; any previous solution is discarded."""

        self._bind_query(query)
        self._query = query
        self.clear_solution()

    def clear_solution(self) -> None:
        self._clear_solution()

    def has_solution(self) -> bool:
        return self._solution_length() is not None

    def solution_length(self) -> float:
        length = self._solution_length()
        if length is None:
            raise LookupError("Session holds no solution path")
        return float(length)

    def _bind_query(self, query: "Query") -> None:
        raise NotImplementedError

    def _clear_solution(self) -> None:
        raise NotImplementedError

    def _solution_length(self) -> Optional[float]:
        raise NotImplementedError


class SessionBuilder:
    """Constructs a :class:`PlanningSession` for one geometry backend."""

    backend: str = ""

    def build(self, obstacles: "ObstacleSet") -> PlanningSession:
        raise NotImplementedError


class SessionBuilderManager:
    """Registry of session builders keyed by backend name."""

    def __init__(self) -> None:
        self._builders: Dict[str, SessionBuilder] = {}

    def register(self, builder: SessionBuilder, *, replace: bool = False) -> None:
        if not builder.backend:
            raise ValueError(f"Session builder {type(builder).__name__} declares no backend")
        if builder.backend in self._builders and not replace:
            raise ValueError(f"Session builder for backend '{builder.backend}' already registered")
        self._builders[builder.backend] = builder

    def get(self, backend: str) -> SessionBuilder:
        try:
            return self._builders[backend]
        except KeyError as exc:
            raise ConfigurationError(f"No session builder registered for backend '{backend}'") from exc

    def __contains__(self, backend: str) -> bool:
        return backend in self._builders

    def backends(self) -> Iterable[str]:
        return tuple(self._builders.keys())

    def unregister(self, backend: str) -> None:
        self._builders.pop(backend, None)


session_builders = SessionBuilderManager()
