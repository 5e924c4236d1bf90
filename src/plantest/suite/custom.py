"""Helpers for loading user-provided planner plugin files."""
from __future__ import annotations

import importlib.machinery
import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Callable

from plantest.core.errors import ConfigurationError


def load_module_from_source(source: Path) -> ModuleType:
    """Import the Python file at ``source`` under a unique module name."""

    path = source.expanduser().resolve()
    if not path.exists():
        raise ConfigurationError(f"Plugin source file not found: {path}")
    module_name = f"plantest_plugin_{path.stem}_{hash(str(path)) & 0xFFFF:x}"
    if module_name in sys.modules:
        return sys.modules[module_name]
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ConfigurationError(f"Unable to load module from {path}")
    module = importlib.util.module_from_spec(spec)
    loader = spec.loader
    assert isinstance(loader, importlib.machinery.SourceFileLoader)  # type: ignore[attr-defined]
    sys.modules[module_name] = module
    loader.exec_module(module)
    return module


def load_from_source(source: Path, func_name: str = "register") -> Callable:
    """Load a callable named ``func_name`` from a Python file at ``source``."""

    module = load_module_from_source(source)
    if not hasattr(module, func_name):
        raise ConfigurationError(f"Function '{func_name}' not found in {source}")
    func = getattr(module, func_name)
    if not callable(func):
        raise ConfigurationError(f"Attribute '{func_name}' in {source} is not callable")
    return func


def register_plugin(source: Path) -> None:
    load_from_source(source, "register")()
