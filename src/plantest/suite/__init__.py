"""Suite file loader and executor."""

from .loader import apply_options, default_suite, load_suite
from .models import EnvironmentConfig, SuiteConfig, SuiteOptions
from .runner import execute_suite, run_suite

__all__ = [
    "EnvironmentConfig",
    "SuiteConfig",
    "SuiteOptions",
    "apply_options",
    "default_suite",
    "execute_suite",
    "load_suite",
    "run_suite",
]
