"""Planner strategy interface, registry and built-in variants."""
from .base import PlannerInstance, PlannerRegistry, PlannerVariant, planner_registry, register_variant

__all__ = [
    "PlannerInstance",
    "PlannerRegistry",
    "PlannerVariant",
    "planner_registry",
    "register_variant",
]
