"""JSON reporter emitting structured trial outcomes."""
from __future__ import annotations

import datetime as dt
import math
import json
import pathlib
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence

import click
from jsonschema import validate

from plantest.core.models import TimingSettings
from plantest.core.results import SuiteResult, TrialOutcome

from .base import Reporter
from .schema import JSON_SCHEMA_V1, SCHEMA_VERSION

if TYPE_CHECKING:
    from plantest.planners.base import PlannerVariant


class JsonReporter(Reporter):
    """Writes outcomes to a JSON file (or stdout) validated against the schema."""

    def __init__(self, path: Optional[str] = None) -> None:
        self._path = pathlib.Path(path) if path else None
        self._records: list[Dict[str, Any]] = []
        self._planners: list[str] = []
        self._timing: TimingSettings | None = None

    def on_start(
        self, variants: Sequence["PlannerVariant"], query_indices: Sequence[int], timing: TimingSettings
    ) -> None:
        self._records.clear()
        self._planners = [variant.name for variant in variants]
        self._timing = timing

    def on_trial_result(self, outcome: TrialOutcome, index: int, total: int) -> None:
        self._records.append(_outcome_to_dict(outcome))

    def on_complete(self, result: SuiteResult) -> None:
        payload = build_payload(result, self._records, self._planners, self._timing or TimingSettings())
        text = json.dumps(payload, indent=2, allow_nan=False)
        if self._path is None:
            click.echo(text)
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(text, encoding="utf-8")
        except OSError as exc:  # pragma: no cover - filesystem protection
            raise RuntimeError(f"Failed to write JSON report to {self._path}: {exc}") from exc
        click.echo(f"JSON report written to {self._path}", err=True)


def build_payload(
    result: SuiteResult,
    records: Sequence[Dict[str, Any]],
    planners: Sequence[str],
    timing: TimingSettings,
) -> Dict[str, Any]:
    payload = {
        "schema_version": SCHEMA_VERSION,
        "generated_at": dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "summary": {
            "total": result.total,
            "passed": result.passed_count,
            "failed": result.failed_count,
            "errors": result.error_count,
            "ok": result.passed,
            "duration_s": result.duration_s,
            "planners": list(planners),
            "timing": {"total": timing.total, "slice": timing.slice, "grace": timing.grace},
        },
        "trials": list(records),
    }
    validate(instance=payload, schema=JSON_SCHEMA_V1)
    return payload


def _outcome_to_dict(outcome: TrialOutcome) -> Dict[str, Any]:
    return {
        "id": outcome.identifier(),
        "planner": outcome.planner,
        "query_index": outcome.query_index,
        "status": outcome.status.value,
        "reason": outcome.reason.value if outcome.reason is not None else None,
        "duration_ms": outcome.duration_s * 1000,
        "rounds": outcome.rounds,
        "initial_length": _finite_or_none(outcome.initial_length),
        "final_length": _finite_or_none(outcome.final_length),
        "lengths": [_finite_or_none(length) for length in outcome.lengths],
        "detail": outcome.detail,
    }


def _finite_or_none(value: Optional[float]) -> Optional[float]:
    """JSON has no NaN or Infinity; such lengths are written as null."""

    if value is None or not math.isfinite(value):
        return None
    return float(value)
