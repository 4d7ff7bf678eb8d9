from __future__ import annotations
import math
import time


class Stopwatch:
    """Measure the wall-clock time of a ``with`` block.

        with Stopwatch() as sw:
            work()
        print(sw.milliseconds)
    """

    def __init__(self, clock=time.perf_counter):
        self._clock = clock
        self.start: float | None = None
        self.stop: float | None = None

    def __enter__(self) -> Stopwatch:
        self.start = self._clock()
        self.stop = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop = self._clock()

    @property
    def elapsed(self) -> float:
        """Seconds between entering and leaving the block (so far, if still inside)."""
        if self.start is None:
            raise RuntimeError("Stopwatch was never started.")
        end = self.stop if self.stop is not None else self._clock()
        return end - self.start

    @property
    def milliseconds(self) -> int:
        # Rounded half away from zero
        return int(math.floor(self.elapsed * 1000 + 0.5))
