"""Loaders for the whitespace separated obstacle and query files."""
from __future__ import annotations

import logging
import math
from importlib import resources
from pathlib import Path
from typing import List, Tuple, Union

from plantest.core.errors import ResourceError

from .models import DEFAULT_GOAL_TOLERANCE, Circle, Environment, ObstacleSet, Query

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

OBSTACLE_FIELDS = 3
QUERY_FIELDS = 4
DEFAULT_OBSTACLE_FILE = "circle_obstacles.txt"
DEFAULT_QUERY_FILE = "circle_queries.txt"


def load_environment(
    obstacle_path: PathLike,
    query_path: PathLike,
    *,
    goal_tolerance: float = DEFAULT_GOAL_TOLERANCE,
) -> Environment:
    """Load obstacles and queries; raise :class:`ResourceError` on bad input."""

    obstacles = load_obstacles(obstacle_path)
    queries = load_queries(query_path, goal_tolerance=goal_tolerance)
    environment = Environment(obstacles, queries)
    logger.debug("Loaded %r from %s and %s", environment, obstacle_path, query_path)
    return environment


def load_default_environment(*, goal_tolerance: float = DEFAULT_GOAL_TOLERANCE) -> Environment:
    """Load the circle fixture bundled with the package."""

    package = resources.files("plantest.resources")
    with resources.as_file(package / DEFAULT_OBSTACLE_FILE) as obstacles, resources.as_file(
        package / DEFAULT_QUERY_FILE
    ) as queries:
        return load_environment(obstacles, queries, goal_tolerance=goal_tolerance)


def load_obstacles(path: PathLike) -> ObstacleSet:
    circles: List[Circle] = []
    for line_no, values in _read_records(path, OBSTACLE_FIELDS):
        x, y, radius = values
        if radius <= 0:
            raise ResourceError(f"{path}:{line_no}: obstacle radius must be positive, got {radius}")
        circles.append(Circle(x=x, y=y, radius=radius))
    if not circles:
        raise ResourceError(f"{path}: no obstacle records found")
    return ObstacleSet(circles)


def load_queries(path: PathLike, *, goal_tolerance: float = DEFAULT_GOAL_TOLERANCE) -> Tuple[Query, ...]:
    queries: List[Query] = []
    for _, values in _read_records(path, QUERY_FIELDS):
        sx, sy, gx, gy = values
        queries.append(Query(start=(sx, sy), goal=(gx, gy), tolerance=goal_tolerance))
    if not queries:
        raise ResourceError(f"{path}: no query records found")
    return tuple(queries)


def _read_records(path: PathLike, width: int) -> List[Tuple[int, Tuple[float, ...]]]:
    source = Path(path).expanduser()
    try:
        text = source.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ResourceError(f"Resource file not found: {source}") from exc
    except OSError as exc:
        raise ResourceError(f"Unable to read {source}: {exc}") from exc
    records: List[Tuple[int, Tuple[float, ...]]] = []
    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        fields = line.split()
        if len(fields) != width:
            raise ResourceError(f"{source}:{line_no}: expected {width} fields, got {len(fields)}")
        try:
            values = tuple(float(field) for field in fields)
        except ValueError as exc:
            raise ResourceError(f"{source}:{line_no}: non-numeric field in {line!r}") from exc
        if not all(math.isfinite(value) for value in values):
            raise ResourceError(f"{source}:{line_no}: non-finite field in {line!r}")
        records.append((line_no, values))
    return records
