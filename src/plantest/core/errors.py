"""Exception taxonomy shared across plantest subsystems."""
from __future__ import annotations

from typing import Optional

from .models import FailureReason


class PlantestError(Exception):
    """Base class for harness errors."""


class ResourceError(PlantestError):
    """Obstacle or query source is missing or malformed."""


class ConfigurationError(PlantestError):
    """Geometry, session or suite configuration cannot be constructed."""


class SolveFailure(PlantestError):
    """A single trial failed the anytime-improvement protocol."""

    def __init__(self, reason: FailureReason, detail: Optional[str] = None) -> None:
        self.reason = reason
        self.detail = detail or reason.value
        super().__init__(self.detail)
