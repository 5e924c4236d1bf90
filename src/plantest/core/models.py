"""Core dataclasses shared across plantest subsystems."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Mapping, Optional

DEFAULT_TOTAL_TIME = 1.0
DEFAULT_SLICE_TIME = 0.1
DEFAULT_MAX_QUERIES = 5
# Fraction of the smallest obstacle radius tolerated as length jitter.
DEFAULT_RADIUS_FRACTION = 1e-3


class FailureReason(str, enum.Enum):
    """Why a trial did not pass."""

    TIMEOUT = "timeout"
    NO_INITIAL_SOLUTION = "no-initial-solution"
    SLICE_SOLVE_FAILED = "slice-solve-failed"
    NON_MONOTONIC_REGRESSION = "non-monotonic-regression"
    NO_IMPROVEMENT = "no-improvement"


class TrialStatus(str, enum.Enum):
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


@dataclass(frozen=True)
class Tolerance:
    """Slack allowed when checking that path lengths never increase."""

    absolute: float = 0.0
    relative: float = 0.0

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "Tolerance":
        if not data:
            return cls()
        return cls(
            absolute=float(data.get("abs", data.get("absolute", 0.0))),
            relative=float(data.get("rel", data.get("relative", 0.0))),
        )

    @classmethod
    def for_obstacles(cls, obstacles, fraction: float = DEFAULT_RADIUS_FRACTION) -> "Tolerance":
        """Scale the absolute slack to the smallest obstacle in the domain."""

        return cls(absolute=float(obstacles.min_radius()) * fraction)

    def slack(self, reference: float) -> float:
        return self.absolute + self.relative * abs(reference)

    def allows(self, previous: float, current: float) -> bool:
        """Return True when ``current`` is not a regression over ``previous``."""

        return current <= previous + self.slack(previous)


@dataclass(frozen=True)
class TimingSettings:
    """Per-query time budget and its slicing for the improvement phase."""

    total: float = DEFAULT_TOTAL_TIME
    slice: float = DEFAULT_SLICE_TIME
    grace: Optional[float] = None

    def __post_init__(self) -> None:
        if self.total <= 0:
            raise ValueError(f"total time budget must be positive, got {self.total}")
        if self.slice <= 0:
            raise ValueError(f"slice time must be positive, got {self.slice}")
        if self.grace is not None and self.grace < 0:
            raise ValueError(f"grace must be non-negative, got {self.grace}")

    def exceeded(self, bound: float, measured: float) -> bool:
        if self.grace is None:
            return False
        return measured > bound + self.grace
