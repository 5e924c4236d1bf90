"""JSON schema definition for reporter output."""
from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

JSON_SCHEMA_V1 = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "plantest report",
    "type": "object",
    "required": ["schema_version", "generated_at", "summary", "trials"],
    "properties": {
        "schema_version": {"type": "string"},
        "generated_at": {"type": "string", "format": "date-time"},
        "summary": {
            "type": "object",
            "required": ["total", "passed", "failed", "errors", "ok", "duration_s", "timing"],
            "properties": {
                "total": {"type": "integer"},
                "passed": {"type": "integer"},
                "failed": {"type": "integer"},
                "errors": {"type": "integer"},
                "ok": {"type": "boolean"},
                "duration_s": {"type": "number"},
                "planners": {"type": "array", "items": {"type": "string"}},
                "timing": {
                    "type": "object",
                    "required": ["total", "slice"],
                    "properties": {
                        "total": {"type": "number"},
                        "slice": {"type": "number"},
                        "grace": {"type": ["number", "null"]},
                    },
                },
            },
        },
        "trials": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "planner", "query_index", "status", "duration_ms", "rounds", "lengths"],
                "properties": {
                    "id": {"type": "string"},
                    "planner": {"type": "string"},
                    "query_index": {"type": "integer", "minimum": 0},
                    "status": {"enum": ["passed", "failed", "error"]},
                    "reason": {
                        "enum": [
                            "timeout",
                            "no-initial-solution",
                            "slice-solve-failed",
                            "non-monotonic-regression",
                            "no-improvement",
                            None,
                        ]
                    },
                    "duration_ms": {"type": "number"},
                    "rounds": {"type": "integer", "minimum": 0},
                    "initial_length": {"type": ["number", "null"]},
                    "final_length": {"type": ["number", "null"]},
                    "lengths": {"type": "array", "items": {"type": ["number", "null"]}},
                    "detail": {"type": ["string", "null"]},
                },
            },
        },
    },
}
