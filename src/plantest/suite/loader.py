"""YAML loader and validation for suite files."""
from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from jsonschema import Draft7Validator

from plantest.core.errors import ConfigurationError
from plantest.core.models import DEFAULT_MAX_QUERIES, TimingSettings, Tolerance

from .models import EnvironmentConfig, SuiteConfig, SuiteOptions

SUITE_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "description": {"type": "string"},
        "environment": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "obstacles": {"type": "string", "minLength": 1},
                "queries": {"type": "string", "minLength": 1},
                "goal_tolerance": {"type": "number", "exclusiveMinimum": 0},
            },
        },
        "planners": {"type": "array", "items": {"type": "string", "minLength": 1}},
        "max_queries": {"type": "integer", "minimum": 1},
        "timing": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "total": {"type": "number", "exclusiveMinimum": 0},
                "slice": {"type": "number", "exclusiveMinimum": 0},
                "grace": {"type": ["number", "null"], "minimum": 0},
            },
        },
        "tolerance": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "abs": {"type": "number", "minimum": 0},
                "rel": {"type": "number", "minimum": 0},
            },
        },
        "plugins": {"type": "array", "items": {"type": "string", "minLength": 1}},
    },
}
_validator = Draft7Validator(SUITE_SCHEMA)


def load_suite(path: str) -> SuiteConfig:
    """Load and validate a suite file."""

    suite_path = Path(path).expanduser().resolve()
    try:
        raw = yaml.safe_load(suite_path.read_text(encoding="utf-8")) or {}
    except OSError as exc:
        raise ConfigurationError(f"Unable to read suite file {suite_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Suite file {suite_path} is not valid YAML: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise ConfigurationError("Suite file must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ConfigurationError(f"Suite schema validation failed: {messages}")
    base = suite_path.parent
    return SuiteConfig(
        name=str(raw.get("name", suite_path.stem)),
        environment=_parse_environment(raw.get("environment"), base),
        planners=tuple(str(name) for name in raw.get("planners", []) or []),
        max_queries=int(raw.get("max_queries", DEFAULT_MAX_QUERIES)),
        timing=_parse_timing(raw.get("timing")),
        tolerance=Tolerance.from_mapping(raw["tolerance"]) if raw.get("tolerance") else None,
        plugins=tuple((base / str(item)).resolve() for item in raw.get("plugins", []) or []),
        suite_dir=base,
    )


def default_suite() -> SuiteConfig:
    """Suite over the bundled fixture with every registered planner."""

    return SuiteConfig()


def apply_options(config: SuiteConfig, options: SuiteOptions) -> SuiteConfig:
    """Overlay command-line overrides on a loaded suite."""

    environment = config.environment
    if options.obstacles is not None or options.queries is not None:
        if options.obstacles is None or options.queries is None:
            raise ConfigurationError("--obstacles and --queries must be given together")
        environment = replace(environment, obstacles=Path(options.obstacles), queries=Path(options.queries))
    if options.no_grace and options.grace is not None:
        raise ConfigurationError("--grace and --no-grace are mutually exclusive")
    timing = config.timing
    overrides = (options.total, options.slice, options.grace)
    if options.no_grace or any(value is not None for value in overrides):
        grace = None if options.no_grace else timing.grace
        timing = _build_timing(
            total=options.total if options.total is not None else timing.total,
            slice_=options.slice if options.slice is not None else timing.slice,
            grace=options.grace if options.grace is not None else grace,
        )
    max_queries = config.max_queries
    if options.max_queries is not None:
        if options.max_queries < 1:
            raise ConfigurationError("max queries must be at least 1")
        max_queries = options.max_queries
    return replace(
        config,
        environment=environment,
        planners=tuple(options.planners) or tuple(config.planners),
        timing=timing,
        max_queries=max_queries,
    )


def _parse_environment(raw: Optional[Mapping[str, Any]], base: Path) -> EnvironmentConfig:
    if not raw:
        return EnvironmentConfig()
    obstacles = raw.get("obstacles")
    queries = raw.get("queries")
    if (obstacles is None) != (queries is None):
        raise ConfigurationError("environment needs both 'obstacles' and 'queries' (or neither)")
    return EnvironmentConfig(
        obstacles=(base / obstacles).resolve() if obstacles else None,
        queries=(base / queries).resolve() if queries else None,
        goal_tolerance=float(raw.get("goal_tolerance", 1e-3)),
    )


def _parse_timing(raw: Optional[Mapping[str, Any]]) -> TimingSettings:
    if not raw:
        return TimingSettings()
    defaults = TimingSettings()
    grace = raw.get("grace")
    return _build_timing(
        total=float(raw.get("total", defaults.total)),
        slice_=float(raw.get("slice", defaults.slice)),
        grace=float(grace) if grace is not None else None,
    )


def _build_timing(*, total: float, slice_: float, grace: Optional[float]) -> TimingSettings:
    try:
        return TimingSettings(total=total, slice=slice_, grace=grace)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc
