"""Reporting exports."""
from .base import CollectingReporter, ReportManager, Reporter
from .json_reporter import JsonReporter
from .terminal import TerminalReporter

__all__ = [
    "CollectingReporter",
    "ReportManager",
    "Reporter",
    "JsonReporter",
    "TerminalReporter",
]
