"""Opt-in timing of named clipboard phases (backend-read, mac-extract, ...)."""

import time
from contextlib import contextmanager


class PhaseProfiler:
    """Aggregates call counts and elapsed time per phase name."""

    def __init__(self, enabled=False, clock=time.perf_counter):
        self.enabled = enabled
        self._clock = clock
        self._phases = {}

    def enable(self):
        self.enabled = True

    def disable(self):
        self.enabled = False

    def record(self, name, elapsed_ms):
        count, total = self._phases.get(name, (0, 0.0))
        self._phases[name] = (count + 1, total + elapsed_ms)

    @contextmanager
    def phase(self, name):
        if not self.enabled:
            yield
            return
        start = self._clock()
        try:
            yield
        finally:
            self.record(name, (self._clock() - start) * 1000.0)

    def export(self, reset=False):
        stats = {
            name: {
                "count": count,
                "total_ms": round(total, 3),
                "avg_ms": round(total / count, 3) if count else 0.0,
            }
            for name, (count, total) in self._phases.items()
        }
        if reset:
            self.reset()
        return stats

    def reset(self):
        self._phases.clear()
