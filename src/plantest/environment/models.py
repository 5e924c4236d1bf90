"""Obstacle set, queries and the environment fixture that owns them."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]

DEFAULT_GOAL_TOLERANCE = 1e-3


@dataclass(frozen=True)
class Circle:
    x: float
    y: float
    radius: float


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle spanned by the obstacle set."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def is_degenerate(self) -> bool:
        return not (np.isfinite([self.width, self.height]).all() and self.width > 0 and self.height > 0)

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


class ObstacleSet:
    """Ordered, read-only collection of circular obstacles."""

    def __init__(self, circles: Sequence[Circle]) -> None:
        data = np.array([(c.x, c.y, c.radius) for c in circles], dtype=np.float64).reshape(-1, 3)
        data.setflags(write=False)
        self._data = data
        self._circles = tuple(circles)

    @property
    def centers(self) -> np.ndarray:
        return self._data[:, :2]

    @property
    def radii(self) -> np.ndarray:
        return self._data[:, 2]

    def __len__(self) -> int:
        return len(self._circles)

    def __iter__(self) -> Iterator[Circle]:
        return iter(self._circles)

    def __getitem__(self, index: int) -> Circle:
        return self._circles[index]

    def bounds(self) -> Bounds:
        if not self._circles:
            return Bounds(0.0, 0.0, 0.0, 0.0)
        lows = self.centers - self.radii[:, None]
        highs = self.centers + self.radii[:, None]
        return Bounds(
            min_x=float(lows[:, 0].min()),
            min_y=float(lows[:, 1].min()),
            max_x=float(highs[:, 0].max()),
            max_y=float(highs[:, 1].max()),
        )

    def min_radius(self) -> float:
        if not self._circles:
            return 0.0
        return float(self.radii.min())

    def is_free(self, x: float, y: float) -> bool:
        """True when the point lies outside every obstacle."""

        diff = self.centers - np.array((x, y), dtype=np.float64)
        dist_sq = np.einsum("ij,ij->i", diff, diff)
        return bool(np.all(dist_sq > self.radii * self.radii))


@dataclass(frozen=True)
class Query:
    """A start/goal pair with the tolerance for reaching the goal state."""

    start: Point
    goal: Point
    tolerance: float = DEFAULT_GOAL_TOLERANCE


class Environment:
    """Obstacle set plus the ordered queries run against it."""

    def __init__(self, obstacles: ObstacleSet, queries: Sequence[Query]) -> None:
        self._obstacles = obstacles
        self._queries = tuple(queries)

    @property
    def obstacles(self) -> ObstacleSet:
        return self._obstacles

    @property
    def queries(self) -> Tuple[Query, ...]:
        return self._queries

    def query_count(self) -> int:
        return len(self._queries)

    def query(self, index: int) -> Query:
        return self._queries[index]

    def __repr__(self) -> str:
        return f"Environment(obstacles={len(self._obstacles)}, queries={len(self._queries)})"
