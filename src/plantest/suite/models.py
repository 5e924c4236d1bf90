"""Data models for suite configuration files."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from plantest.core.models import DEFAULT_MAX_QUERIES, TimingSettings, Tolerance


@dataclass(frozen=True)
class EnvironmentConfig:
    obstacles: Optional[Path] = None
    queries: Optional[Path] = None
    goal_tolerance: float = 1e-3

    @property
    def bundled(self) -> bool:
        return self.obstacles is None and self.queries is None


@dataclass(frozen=True)
class SuiteConfig:
    name: str = "circles2d"
    environment: EnvironmentConfig = field(default_factory=EnvironmentConfig)
    planners: Sequence[str] = field(default_factory=tuple)
    max_queries: int = DEFAULT_MAX_QUERIES
    timing: TimingSettings = field(default_factory=TimingSettings)
    tolerance: Optional[Tolerance] = None
    plugins: Sequence[Path] = field(default_factory=tuple)
    suite_dir: Optional[Path] = None


@dataclass(frozen=True)
class SuiteOptions:
    """Command-line overrides applied on top of a suite file."""

    planners: Sequence[str] = field(default_factory=tuple)
    obstacles: Optional[Path] = None
    queries: Optional[Path] = None
    total: Optional[float] = None
    slice: Optional[float] = None
    grace: Optional[float] = None
    no_grace: bool = False
    max_queries: Optional[int] = None
    list_only: bool = False
