from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from plantest import __version__
from plantest.cli.main import cli, main

REPO_ROOT = Path(__file__).resolve().parents[1]
PLUGIN_SUITE = REPO_ROOT / "examples" / "custom_planner" / "suite.yaml"


def test_cli_help_short_flag() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["-h"])
    assert result.exit_code == 0
    assert "Usage:" in result.output
    assert "run" in result.output
    assert "planners" in result.output


def test_cli_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == f"plantest {__version__}"


def test_cli_lists_builtin_planners() -> None:
    result = CliRunner().invoke(cli, ["planners"])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert any(line.startswith("RRTstar") and "[ompl]" in line for line in lines)
    assert any(line.startswith("PRMstar") and "[ompl]" in line for line in lines)


def test_cli_run_plugin_suite(custom_planner_plugin) -> None:
    result = CliRunner().invoke(
        cli,
        ["run", "--suite", str(PLUGIN_SUITE), "--planner", "ShrinkingPlanner", "--no-color"],
    )
    assert result.exit_code == 0, result.output
    assert "PASS  ShrinkingPlanner/query0" in result.output
    assert "PASS  ShrinkingPlanner/query1" in result.output
    assert "Summary: total=2 passed=2 failed=0 errors=0" in result.output


def test_cli_run_reports_failures(custom_planner_plugin) -> None:
    result = CliRunner().invoke(
        cli,
        ["run", "--suite", str(PLUGIN_SUITE), "--planner", "Stalling*", "--max-queries", "1", "--no-color"],
    )
    assert result.exit_code == 1
    assert "FAIL  StallingPlanner/query0" in result.output
    assert "reason=no-improvement" in result.output


def test_cli_json_report(custom_planner_plugin, tmp_path: Path) -> None:
    report_path = tmp_path / "report.json"
    result = CliRunner().invoke(
        cli,
        [
            "run",
            "--suite",
            str(PLUGIN_SUITE),
            "--planner",
            "ShrinkingPlanner,StallingPlanner",
            "--max-queries",
            "1",
            "--time-budget",
            "0.15",
            "--report",
            "json",
            "--report-path",
            str(report_path),
        ],
    )
    assert result.exit_code == 1
    data = json.loads(report_path.read_text(encoding="utf-8"))
    assert [trial["status"] for trial in data["trials"]] == ["passed", "failed"]
    assert data["summary"]["timing"]["total"] == 0.15


def test_cli_list_trials(custom_planner_plugin) -> None:
    result = CliRunner().invoke(cli, ["run", "--suite", str(PLUGIN_SUITE), "--list"])
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "ShrinkingPlanner/query0",
        "ShrinkingPlanner/query1",
        "StallingPlanner/query0",
        "StallingPlanner/query1",
    ]


def test_cli_bad_obstacle_file(tmp_path: Path) -> None:
    obstacles = tmp_path / "obstacles.txt"
    obstacles.write_text("1.0 1.0\n", encoding="utf-8")
    queries = tmp_path / "queries.txt"
    queries.write_text("0 0 1 1\n", encoding="utf-8")
    result = CliRunner().invoke(
        cli,
        ["run", "--obstacles", str(obstacles), "--queries", str(queries), "--planner", "RRTstar"],
    )
    assert result.exit_code != 0
    assert "expected 3 fields, got 2" in result.output


def test_cli_rejects_half_environment(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["run", "--obstacles", str(tmp_path / "obstacles.txt")])
    assert result.exit_code != 0
    assert "--obstacles and --queries must be given together" in result.output


def test_cli_unknown_planner() -> None:
    result = CliRunner().invoke(cli, ["run", "--planner", "BITstar"])
    assert result.exit_code != 0
    assert "No planner matches BITstar" in result.output


def test_main_returns_exit_code(capsys) -> None:
    assert main(["--version"]) == 0
    assert __version__ in capsys.readouterr().out


def test_cli_no_grace_conflicts_with_grace() -> None:
    result = CliRunner().invoke(cli, ["run", "--grace", "0.1", "--no-grace"])
    assert result.exit_code != 0
    assert "mutually exclusive" in result.output
