"""Shared test fixtures for quickbench tests."""

from __future__ import annotations

from typing import Any

from quickbench.candidate import Candidate, Sample


class FakeClock:
    """Stand-in for ``time.perf_counter`` that advances *step* per call."""

    def __init__(self, step: float = 0.01, start: float = 100.0) -> None:
        self.step = step
        self.now = start
        self.calls = 0

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        self.calls += 1
        return value


class CallRecorder:
    """Callable that records the arguments of every invocation."""

    def __init__(self, log: list[Any] | None = None, tag: str = "") -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.log = log
        self.tag = tag

    def __call__(self, *args: Any) -> str:
        self.calls.append(args)
        if self.log is not None:
            self.log.append(self.tag)
        return "ignored"


def noop() -> None:
    """Do nothing."""


def make_candidate(samples: list[tuple[float, int]]) -> Candidate:
    """Create a no-op candidate with pre-recorded ``(elapsed, runs)`` samples."""
    cand = Candidate(callback=noop)
    cand.samples.extend(Sample(elapsed=e, run_count=r) for e, r in samples)
    return cand
