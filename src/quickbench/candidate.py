"""Benchmark candidates and the samples they record.

A :class:`Candidate` wraps one callable plus the fixed arguments it is
invoked with.  Each call to :meth:`Candidate.run` times a whole batch of
invocations with a single start/stop pair and appends one
:class:`Sample`.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from quickbench.formatting import format_sample

log = logging.getLogger("quickbench")


# ---------------------------------------------------------------------------
# Sample
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Sample:
    """Elapsed wall-clock time for one batch of invocations."""

    elapsed: float  # seconds
    run_count: int

    def __post_init__(self) -> None:
        if self.run_count <= 0:
            raise ValueError(f"Sample run_count must be positive (got {self.run_count}).")
        if self.elapsed < 0:
            raise ValueError(f"Sample elapsed time cannot be negative (got {self.elapsed}).")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {"elapsed": round(self.elapsed, 9), "run_count": self.run_count}


# ---------------------------------------------------------------------------
# Candidate
# ---------------------------------------------------------------------------


@dataclass
class Candidate:
    """One benchmarked operation: a callable, its arguments and its samples."""

    callback: Callable[..., Any]
    arguments: tuple[Any, ...] = ()
    samples: list[Sample] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not callable(self.callback):
            raise TypeError(
                f"Candidate callback must be callable, got {type(self.callback).__name__}"
            )
        self.arguments = tuple(self.arguments)

    def run(self, run_count: int) -> Candidate:
        """Invoke the callback *run_count* times and record one sample.

        The whole batch is timed with one ``perf_counter`` pair, so the
        loop overhead is part of the measurement.  A non-positive
        *run_count* records nothing.
        """
        if run_count <= 0:
            log.warning("Ignoring candidate run with non-positive run count %d", run_count)
            return self

        callback = self.callback
        args = self.arguments
        start = time.perf_counter()
        for _ in range(run_count):
            callback(*args)
        elapsed = time.perf_counter() - start

        self.samples.append(Sample(elapsed=max(elapsed, 0.0), run_count=run_count))
        return self

    @property
    def total_elapsed(self) -> float:
        """Sum of elapsed time over all samples."""
        return math.fsum(s.elapsed for s in self.samples)

    @property
    def total_runs(self) -> int:
        """Sum of run counts over all samples."""
        return sum(s.run_count for s in self.samples)

    def per(self, run_count: int) -> float:
        """Extrapolate the recorded cost to *run_count* invocations.

        Computed as ``total_elapsed * run_count / total_runs``, assuming a
        constant per-call cost.  Returns NaN when there are no samples.
        """
        total_runs = self.total_runs
        if total_runs == 0:
            return float("nan")
        return self.total_elapsed * run_count / total_runs

    def discard_samples(self) -> Candidate:
        """Forget all recorded samples."""
        self.samples.clear()
        return self

    def results(self, precision: int) -> str:
        """One formatted line per sample, oldest first."""
        return "\n".join(format_sample(s, precision) for s in self.samples)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the recorded data (not the callable) to a dict."""
        return {
            "samples": [s.to_dict() for s in self.samples],
            "total_runs": self.total_runs,
            "total_elapsed": round(self.total_elapsed, 9),
        }
