"""Core models, protocol engine and suite driver."""
from .clock import Clock, MonotonicClock
from .errors import ConfigurationError, PlantestError, ResourceError, SolveFailure
from .models import FailureReason, TimingSettings, Tolerance, TrialStatus
from .objective import ObjectiveMode, OptimizationObjective
from .results import SuiteResult, TrialOutcome
from .session import PlanningSession, SessionBuilder, SessionBuilderManager, session_builders

__all__ = [
    "Clock",
    "MonotonicClock",
    "ConfigurationError",
    "PlantestError",
    "ResourceError",
    "SolveFailure",
    "FailureReason",
    "TimingSettings",
    "Tolerance",
    "TrialStatus",
    "ObjectiveMode",
    "OptimizationObjective",
    "SuiteResult",
    "TrialOutcome",
    "PlanningSession",
    "SessionBuilder",
    "SessionBuilderManager",
    "session_builders",
]
