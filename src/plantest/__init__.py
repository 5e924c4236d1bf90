"""plantest package initialization."""
from __future__ import annotations

import importlib
import os

from .version import __version__

__all__ = [
    "__version__",
    "bootstrap",
]

PLUGIN_ENV = "PLANTEST_PLUGINS"

_BOOTSTRAPPED = False


def bootstrap() -> None:
    """Register built-in planners and env-listed plugins (idempotent)."""

    global _BOOTSTRAPPED
    if _BOOTSTRAPPED:
        return
    _load_builtins()
    _load_plugins()
    _BOOTSTRAPPED = True


def _load_builtins() -> None:
    from .planners import ompl

    ompl.register()


def _load_plugins() -> None:
    plugin_env = os.environ.get(PLUGIN_ENV)
    if not plugin_env:
        return
    for item in plugin_env.split(","):
        module_name = item.strip()
        if not module_name:
            continue
        module = importlib.import_module(module_name)
        register = getattr(module, "register", None)
        if callable(register):
            register()
