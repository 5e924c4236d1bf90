"""Terminal reporter rendering progress and summaries."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

import click
from colorama import Fore, Style, init as colorama_init

from plantest.core.models import TimingSettings, TrialStatus
from plantest.core.results import SuiteResult, TrialOutcome

from .base import Reporter

if TYPE_CHECKING:
    from plantest.planners.base import PlannerVariant


STATUS_COLORS = {
    TrialStatus.PASSED: Fore.GREEN,
    TrialStatus.FAILED: Fore.RED,
    TrialStatus.ERROR: Fore.YELLOW,
}

STATUS_LABELS = {
    TrialStatus.PASSED: "PASS",
    TrialStatus.FAILED: "FAIL",
    TrialStatus.ERROR: "ERROR",
}


class TerminalReporter(Reporter):
    """Human-readable reporter that streams to stdout."""

    def __init__(self, *, use_color: bool = True) -> None:
        self._use_color = use_color
        self._failures: list[tuple[int, TrialOutcome]] = []
        if use_color:
            colorama_init()

    def on_start(
        self, variants: Sequence["PlannerVariant"], query_indices: Sequence[int], timing: TimingSettings
    ) -> None:
        self._failures.clear()
        names = ", ".join(variant.name for variant in variants) or "none"
        grace = f" grace={timing.grace:g}s" if timing.grace is not None else ""
        self._echo(
            self._styled(
                f"Starting run: {len(variants)} planner(s) [{names}] x {len(query_indices)} query(ies) "
                f"budget={timing.total:g}s slice={timing.slice:g}s{grace}",
                Fore.CYAN,
            )
        )

    def on_trial_result(self, outcome: TrialOutcome, index: int, total: int) -> None:
        label = self._styled(f"{STATUS_LABELS[outcome.status]:<5}", STATUS_COLORS[outcome.status])
        ms = outcome.duration_s * 1000
        self._echo(f"[{index}/{total}] {label} {outcome.identifier()} ({ms:.1f} ms)")
        if outcome.passed:
            self._echo(f"    lengths: {_format_lengths(outcome)}")
        else:
            self._failures.append((index, outcome))
            self._print_failure_details(outcome)

    def on_complete(self, result: SuiteResult) -> None:
        color = Fore.GREEN if result.passed else Fore.RED
        self._echo(
            self._styled(
                f"Summary: total={result.total} passed={result.passed_count} failed={result.failed_count} "
                f"errors={result.error_count} duration={result.duration_s:.2f}s",
                color,
            )
        )
        if self._failures:
            self._echo(self._styled("Failure details:", Fore.RED))
            for index, outcome in self._failures:
                self._echo(f"  [{index}] {outcome.identifier()} -> {_reason_text(outcome)}")
                self._print_failure_details(outcome, indent="    ")

    def _echo(self, text: str) -> None:
        # click strips ANSI codes from non-tty streams unless color is forced.
        click.echo(text, color=True if self._use_color else None)

    def _styled(self, text: str, color: Optional[str]) -> str:
        if not self._use_color or not color:
            return text
        return f"{color}{text}{Style.RESET_ALL}"

    def _print_failure_details(self, outcome: TrialOutcome, *, indent: str = "    ") -> None:
        self._echo(
            f"{indent}planner={outcome.planner} query={outcome.query_index} "
            f"reason={_reason_text(outcome)} rounds={outcome.rounds}"
        )
        if outcome.lengths:
            self._echo(f"{indent}lengths: {_format_lengths(outcome)}")
        if outcome.detail:
            self._echo(f"{indent}detail: {outcome.detail}")


def _reason_text(outcome: TrialOutcome) -> str:
    if outcome.reason is not None:
        return outcome.reason.value
    return outcome.status.value


def _format_lengths(outcome: TrialOutcome, limit: int = 8) -> str:
    values = [f"{length:.4f}" for length in outcome.lengths]
    if len(values) > limit:
        values = values[: limit // 2] + ["..."] + values[-limit // 2 :]
    return " -> ".join(values) or "-"
