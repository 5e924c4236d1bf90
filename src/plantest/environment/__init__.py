"""Environment fixture: circle obstacles and start/goal queries."""
from .loader import load_default_environment, load_environment, load_obstacles, load_queries
from .models import Bounds, Circle, Environment, ObstacleSet, Query

__all__ = [
    "Bounds",
    "Circle",
    "Environment",
    "ObstacleSet",
    "Query",
    "load_default_environment",
    "load_environment",
    "load_obstacles",
    "load_queries",
]
