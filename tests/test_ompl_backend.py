from __future__ import annotations

from unittest import mock

import pytest

from plantest.core import ConfigurationError, SuiteResult, TimingSettings, TrialStatus
from plantest.core.runner import SuiteRunner
from plantest.environment import Bounds, ObstacleSet, load_default_environment
from plantest.planners import planner_registry
from plantest.planners import ompl as ompl_planners

from .fakes import FakeSession


def test_missing_bindings_raise_configuration_error(environment) -> None:
    with mock.patch.object(ompl_planners.importlib, "import_module", side_effect=ImportError("no ompl")):
        with pytest.raises(ConfigurationError, match=r"plantest\[ompl\]"):
            ompl_planners.OmplSessionBuilder().build(environment.obstacles)


def test_missing_bindings_abort_the_suite(environment) -> None:
    runner = SuiteRunner(environment, timing=TimingSettings(total=0.2, slice=0.05))
    with mock.patch.object(ompl_planners.importlib, "import_module", side_effect=ImportError("no ompl")):
        with pytest.raises(ConfigurationError):
            runner.run([planner_registry.get("RRTstar")])


def test_variant_rejects_foreign_session(small_environment) -> None:
    with pytest.raises(ConfigurationError, match="needs an OMPL session"):
        planner_registry.get("PRMstar").new_planner(FakeSession(small_environment.obstacles))


def test_degenerate_domain_rejected(small_environment) -> None:
    flat = Bounds(min_x=0.0, min_y=0.0, max_x=4.0, max_y=0.0)
    with mock.patch.object(ompl_planners, "import_ompl", return_value=(mock.Mock(), mock.Mock())), mock.patch.object(
        ObstacleSet, "bounds", return_value=flat
    ):
        with pytest.raises(ConfigurationError, match="Degenerate planning domain"):
            ompl_planners.build_space_information(small_environment.obstacles)


@pytest.fixture(scope="module")
def ompl_result() -> SuiteResult:
    pytest.importorskip("ompl.geometric")
    runner = SuiteRunner(load_default_environment(), timing=TimingSettings(total=1.0, slice=0.1))
    return runner.run([planner_registry.get("RRTstar"), planner_registry.get("PRMstar")])


@pytest.mark.parametrize("planner", ["RRTstar", "PRMstar"])
@pytest.mark.parametrize("query_index", range(5))
def test_anytime_improvement_conformance(ompl_result: SuiteResult, planner: str, query_index: int) -> None:
    matches = [
        outcome
        for outcome in ompl_result.outcomes
        if outcome.planner == planner and outcome.query_index == query_index
    ]
    assert len(matches) == 1
    outcome = matches[0]
    assert outcome.status is TrialStatus.PASSED, f"{outcome.identifier()}: {outcome.reason} {outcome.detail}"
    assert outcome.final_length < outcome.initial_length
    assert outcome.rounds >= 1
