"""CLI entry point for plantest."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from plantest import __version__, bootstrap
from plantest.core.errors import PlantestError
from plantest.planners import planner_registry
from plantest.suite import SuiteOptions, apply_options, default_suite, load_suite, run_suite


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class CliState:
    """Holds global CLI state."""

    def __init__(self, verbose: bool) -> None:
        self.verbose = verbose


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"plantest {__version__}")
    raise click.exceptions.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the plantest version and exit.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Conformance checks for anytime optimizing motion planners."""

    _configure_logging(verbose)
    bootstrap()
    ctx.obj = CliState(verbose=verbose)


@cli.command()
@click.option(
    "--suite",
    "suite_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML suite file; defaults to the bundled circle fixture with every planner.",
)
@click.option("--obstacles", type=click.Path(dir_okay=False), help="Obstacle file (x y r per line).")
@click.option("--queries", type=click.Path(dir_okay=False), help="Query file (sx sy gx gy per line).")
@click.option("--planner", "planners", multiple=True, help="Planner name or glob; repeatable.")
@click.option("--time-budget", type=float, help="Per-query time budget in seconds.")
@click.option("--slice", "slice_time", type=float, help="Length of one improvement slice in seconds.")
@click.option("--grace", type=float, help="Allowed overrun of a solve call before it counts as a timeout.")
@click.option("--no-grace", is_flag=True, help="Disable the overrun allowance set by the suite file.")
@click.option("--max-queries", type=int, help="Number of fixture queries to run per planner.")
@click.option("--list", "list_only", is_flag=True, help="List matched trials without running.")
@click.option(
    "--report",
    "report_format",
    type=click.Choice(["terminal", "json"]),
    default="terminal",
    show_default=True,
    help="Report format (terminal by default).",
)
@click.option("--report-path", type=str, help="When --report json, write to this path.")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
@click.pass_obj
def run(
    state: CliState,
    suite_path: Optional[str],
    obstacles: Optional[str],
    queries: Optional[str],
    planners: Tuple[str, ...],
    time_budget: Optional[float],
    slice_time: Optional[float],
    grace: Optional[float],
    no_grace: bool,
    max_queries: Optional[int],
    list_only: bool,
    report_format: str,
    report_path: Optional[str],
    no_color: bool,
) -> None:
    """Run the anytime-improvement protocol for every planner and query."""

    options = SuiteOptions(
        planners=_split_csv(planners),
        obstacles=Path(obstacles) if obstacles else None,
        queries=Path(queries) if queries else None,
        total=time_budget,
        slice=slice_time,
        grace=grace,
        no_grace=no_grace,
        max_queries=max_queries,
        list_only=list_only,
    )
    try:
        config = load_suite(suite_path) if suite_path else default_suite()
        config = apply_options(config, options)
        exit_code = run_suite(
            config,
            report_format=report_format,
            report_path=report_path,
            use_color=not no_color,
            list_only=options.list_only,
        )
    except PlantestError as exc:
        raise click.ClickException(str(exc)) from exc
    raise click.exceptions.Exit(exit_code)


@cli.command("planners")
def list_planners() -> None:
    """List registered planner variants."""

    for variant in planner_registry:
        description = f"  {variant.description}" if variant.description else ""
        click.echo(f"{variant.name:<16}[{variant.backend}]{description}")


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="plantest", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


def _split_csv(values: Tuple[str, ...]) -> Tuple[str, ...]:
    parts = []
    for value in values:
        parts.extend(part.strip() for part in value.split(",") if part.strip())
    return tuple(parts)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
