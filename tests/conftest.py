from __future__ import annotations

from pathlib import Path

import pytest

from plantest import bootstrap
from plantest.core import SessionBuilderManager
from plantest.environment import Circle, Environment, ObstacleSet, Query, load_default_environment
from plantest.planners import PlannerRegistry

from .fakes import FakeClock, FakeSession, FakeSessionBuilder

REPO_ROOT = Path(__file__).resolve().parents[1]
EXAMPLES_DIR = REPO_ROOT / "examples"


@pytest.fixture(scope="session", autouse=True)
def setup_plantest_registry() -> None:
    """Register built-in planners/builders once for the entire test session."""

    bootstrap()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def environment() -> Environment:
    return load_default_environment()


@pytest.fixture
def small_environment() -> Environment:
    obstacles = ObstacleSet([Circle(0.0, 0.0, 1.0), Circle(4.0, 4.0, 0.5)])
    queries = [Query(start=(-0.9, 2.0), goal=(3.0, 2.0)), Query(start=(2.0, -0.9), goal=(2.0, 4.3))]
    return Environment(obstacles, queries)


@pytest.fixture
def builder() -> FakeSessionBuilder:
    return FakeSessionBuilder()


@pytest.fixture
def builders(builder: FakeSessionBuilder) -> SessionBuilderManager:
    manager = SessionBuilderManager()
    manager.register(builder)
    return manager


@pytest.fixture
def session(small_environment: Environment) -> FakeSession:
    return FakeSession(small_environment.obstacles)


@pytest.fixture
def registry() -> PlannerRegistry:
    return PlannerRegistry()


@pytest.fixture
def custom_planner_plugin():
    """Path of the example plugin; its registrations are undone afterwards."""

    from plantest.core import session_builders
    from plantest.planners import planner_registry

    yield EXAMPLES_DIR / "custom_planner" / "plugin.py"
    for name in ("ShrinkingPlanner", "StallingPlanner"):
        planner_registry.unregister(name)
    session_builders.unregister("inmemory")
