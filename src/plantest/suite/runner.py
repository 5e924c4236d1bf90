"""Executor wiring a suite configuration to the suite driver."""
from __future__ import annotations

import logging
from typing import List, Optional

import click

from plantest.core.clock import Clock
from plantest.core.errors import ConfigurationError
from plantest.core.results import SuiteResult
from plantest.core.runner import SuiteRunner
from plantest.environment import Environment, load_default_environment, load_environment
from plantest.planners.base import PlannerRegistry, PlannerVariant, planner_registry
from plantest.reporting import JsonReporter, Reporter, TerminalReporter

from . import custom
from .models import EnvironmentConfig, SuiteConfig

logger = logging.getLogger(__name__)


def run_suite(
    config: SuiteConfig,
    *,
    report_format: str = "terminal",
    report_path: Optional[str] = None,
    use_color: bool = True,
    list_only: bool = False,
    registry: Optional[PlannerRegistry] = None,
    clock: Optional[Clock] = None,
) -> int:
    """Execute the suite; returns process exit code (0 success, 1 failures)."""

    result = execute_suite(
        config,
        reporter=None if list_only else _build_reporter(report_format, report_path, use_color),
        list_only=list_only,
        registry=registry,
        clock=clock,
    )
    if result is None:
        return 0
    return result.exit_code


def execute_suite(
    config: SuiteConfig,
    *,
    reporter: Optional[Reporter] = None,
    list_only: bool = False,
    registry: Optional[PlannerRegistry] = None,
    clock: Optional[Clock] = None,
) -> Optional[SuiteResult]:
    for plugin in config.plugins:
        logger.debug("Loading planner plugin %s", plugin)
        custom.register_plugin(plugin)
    environment = load_suite_environment(config.environment)
    variants = select_variants(config, registry if registry is not None else planner_registry)
    runner = SuiteRunner(
        environment,
        timing=config.timing,
        tolerance=config.tolerance,
        max_queries=config.max_queries,
        clock=clock,
        reporter=reporter,
    )
    if list_only:
        for variant in variants:
            for index in runner.query_indices:
                click.echo(f"{variant.name}/query{index}")
        return None
    return runner.run(variants)


def load_suite_environment(config: EnvironmentConfig) -> Environment:
    if config.bundled:
        return load_default_environment(goal_tolerance=config.goal_tolerance)
    return load_environment(config.obstacles, config.queries, goal_tolerance=config.goal_tolerance)


def select_variants(config: SuiteConfig, registry: PlannerRegistry) -> List[PlannerVariant]:
    try:
        variants = registry.select(config.planners)
    except KeyError as exc:
        raise ConfigurationError(str(exc.args[0])) from exc
    if not variants:
        raise ConfigurationError("No planner variants registered")
    return variants


def _build_reporter(report_format: str, report_path: Optional[str], use_color: bool) -> Reporter:
    if report_format == "json":
        return JsonReporter(report_path)
    return TerminalReporter(use_color=use_color)
