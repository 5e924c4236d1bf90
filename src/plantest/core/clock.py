"""Wall-clock abstraction injected into the verifier."""
from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Anything returning monotonically increasing seconds."""

    def now(self) -> float:
        ...


class MonotonicClock:
    """Real clock backed by :func:`time.perf_counter`."""

    def now(self) -> float:
        return time.perf_counter()
