"""Benchmark registry: named candidates and the passes that run them.

Usage::

    bench = QuickBench.make(runs=1000, precision=5)
    bench.candidate("join", "".join, [["a", "b"]])
    bench.candidate("concat", lambda a, b: a + b, ["a", "b"])
    bench.run().run(10000)
    print(bench.results())

Execution is strictly sequential: candidates run one after the other, in
registration order, each completing its whole batch before the next
starts.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Sequence, Union

from quickbench.candidate import Candidate
from quickbench.config import BenchSettings
from quickbench.formatting import (
    PER_RUNS,
    format_candidate_block,
    format_comparison,
    format_summary,
)

log = logging.getLogger("quickbench")

# A name filter: a name, or an arbitrarily nested sequence of names.
NameSpec = Union[str, Iterable["NameSpec"]]

# Safety margin applied to the linear next-round estimate.
_ESTIMATE_MARGIN = 0.95


# ---------------------------------------------------------------------------
# Name flattening
# ---------------------------------------------------------------------------


def flatten(names: NameSpec) -> list[str]:
    """Flatten an arbitrarily nested sequence of names, preserving order.

    A bare string is a single name; it is never split into characters.

    >>> flatten(["a", ["b", ("c",)], "d"])
    ['a', 'b', 'c', 'd']
    """
    return list(_iter_names(names))


def _iter_names(names: NameSpec) -> Iterator[str]:
    if isinstance(names, str):
        yield names
        return
    for item in names:
        yield from _iter_names(item)


# ---------------------------------------------------------------------------
# RunSummary
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RunSummary:
    """Outcome of one registry-level pass."""

    run_count: int
    candidate_count: int
    elapsed: float  # seconds, whole pass

    def format(self, precision: int) -> str:
        """Render as a one-line summary."""
        return format_summary(self, precision)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "run_count": self.run_count,
            "candidate_count": self.candidate_count,
            "elapsed": round(self.elapsed, 9),
        }


# ---------------------------------------------------------------------------
# QuickBench
# ---------------------------------------------------------------------------


class QuickBench:
    """A benchmarking session owning named :class:`Candidate` objects.

    Most methods return ``self`` so calls can be chained.
    """

    def __init__(self, settings: BenchSettings | None = None) -> None:
        self.settings = settings or BenchSettings()
        self.candidates: dict[str, Candidate] = {}
        self.summaries: list[RunSummary] = []

    @classmethod
    def make(cls, runs: int = 1, precision: int = 10) -> QuickBench:
        """Create a registry with the given default run count and precision."""
        return cls(BenchSettings(default_runs=runs, precision=precision))

    # -- configuration -----------------------------------------------------

    @property
    def default_runs(self) -> int:
        """Run count used when :meth:`run` is called without one."""
        return self.settings.default_runs

    @default_runs.setter
    def default_runs(self, value: int) -> None:
        self.settings.default_runs = value

    @property
    def precision(self) -> int:
        """Decimal digits used in reports.  Never affects stored data."""
        return self.settings.precision

    @precision.setter
    def precision(self, value: int) -> None:
        self.settings.precision = value

    # -- candidates --------------------------------------------------------

    @property
    def names(self) -> list[str]:
        """Candidate names in registration order."""
        return list(self.candidates)

    def __len__(self) -> int:
        return len(self.candidates)

    def __contains__(self, name: object) -> bool:
        return name in self.candidates

    def candidate(
        self,
        name: str,
        callback: Callable[..., Any],
        arguments: Sequence[Any] = (),
    ) -> QuickBench:
        """Register *callback* under *name*, replacing any existing candidate.

        Replacing a candidate also drops its samples.
        """
        if name in self.candidates:
            log.debug("Replacing candidate '%s'", name)
        self.candidates[name] = Candidate(callback=callback, arguments=tuple(arguments))
        return self

    def remove_candidate(self, *names: NameSpec) -> QuickBench:
        """Remove candidates by name.  Unknown names are ignored."""
        for name in flatten(names):
            if self.candidates.pop(name, None) is None:
                log.debug("No candidate named '%s' to remove", name)
        return self

    def _select(self, names: tuple[NameSpec, ...]) -> dict[str, Candidate]:
        """Candidates matching *names* in registry order; all if *names* is empty."""
        if not names:
            return dict(self.candidates)
        wanted = set(flatten(names))
        unknown = wanted.difference(self.candidates)
        if unknown:
            log.debug("Ignoring unknown candidate name(s): %s", ", ".join(sorted(unknown)))
        return {n: c for n, c in self.candidates.items() if n in wanted}

    # -- benchmark passes --------------------------------------------------

    def run(self, run_count: int = 0, *names: NameSpec) -> QuickBench:
        """Run candidates *run_count* times each.

        A non-positive *run_count* falls back to :attr:`default_runs`; if
        that is non-positive too the pass does nothing and is recorded
        as a ``0 runs`` summary.  With *names*, only the matching
        candidates run.
        """
        if run_count <= 0:
            run_count = self.settings.default_runs
        if run_count <= 0:
            log.warning("No positive run count given and default_runs is %d", run_count)
            self._record(RunSummary(run_count=0, candidate_count=0, elapsed=0.0))
            return self

        selected = self._select(names)

        start = time.perf_counter()
        for name, cand in selected.items():
            log.debug("Running '%s' %d times", name, run_count)
            cand.run(run_count)
        elapsed = time.perf_counter() - start

        self._record(
            RunSummary(run_count=run_count, candidate_count=len(selected), elapsed=elapsed)
        )
        return self

    def run_iterative(
        self,
        time_limit: float | None = None,
        initial_runs: int | None = None,
        multiplier: int | None = None,
    ) -> QuickBench:
        """Run rounds of growing size until the next one would exceed *time_limit*.

        Round sizes are ``initial_runs * multiplier ** k``.  After each
        round the next round's duration is estimated as
        ``multiplier * 0.95 * accumulated_elapsed``; the loop stops once
        that estimate reaches *time_limit*.  At least one round always
        runs, and a single slow round may overshoot the limit.

        Missing arguments fall back to the registry settings.  Run counts
        that are not positive integers, or a multiplier below 1, make the
        call a logged no-op.
        """
        if time_limit is None:
            time_limit = self.settings.time_limit
        if initial_runs is None:
            initial_runs = self.settings.initial_runs
        if multiplier is None:
            multiplier = self.settings.multiplier

        if (
            not isinstance(initial_runs, int)
            or not isinstance(multiplier, int)
            or initial_runs <= 0
            or multiplier < 1
        ):
            log.warning(
                "Skipping iterative run: initial_runs=%r, multiplier=%r cannot converge",
                initial_runs,
                multiplier,
            )
            return self

        run_count = initial_runs
        accumulated = 0.0
        rounds = 0
        while True:
            self.run(run_count)
            rounds += 1
            accumulated += self.summaries[-1].elapsed
            estimate = multiplier * _ESTIMATE_MARGIN * accumulated
            log.debug(
                "Round %d: %d runs, %.6fs so far, next round estimated at %.6fs",
                rounds,
                run_count,
                accumulated,
                estimate,
            )
            if estimate >= time_limit or not self.candidates:
                break
            run_count *= multiplier

        log.info("Iterative run finished after %d round(s) in %.3f seconds", rounds, accumulated)
        return self

    def _record(self, summary: RunSummary) -> None:
        self.summaries.append(summary)
        log.info("%s", summary.format(self.settings.precision))

    def discard_samples(self, *names: NameSpec) -> QuickBench:
        """Discard samples of the named candidates, or of all candidates."""
        for cand in self._select(names).values():
            cand.discard_samples()
        return self

    # -- reporting ---------------------------------------------------------

    def _resolve_precision(self, precision: int | None) -> int:
        return self.settings.precision if precision is None else precision

    def summary(self, precision: int | None = None) -> str:
        """The most recent pass summary, or an empty string if nothing ran."""
        if not self.summaries:
            return ""
        return self.summaries[-1].format(self._resolve_precision(precision))

    def results(self, precision: int | None = None) -> str:
        """Per-candidate averages and sample lines, in registration order."""
        precision = self._resolve_precision(precision)
        return "\n\n".join(
            format_candidate_block(name, cand, precision) for name, cand in self.candidates.items()
        )

    def ranking(self) -> list[tuple[str, float, int]]:
        """``(name, seconds per 10000 runs, total runs)`` for sampled candidates, fastest first."""
        rows = [
            (name, cand.per(PER_RUNS), cand.total_runs)
            for name, cand in self.candidates.items()
            if cand.samples
        ]
        rows.sort(key=lambda row: row[1])
        return rows

    def comparison(self, precision: int | None = None) -> str:
        """A ranked table of sampled candidates, fastest first."""
        return format_comparison(self.ranking(), self._resolve_precision(precision))

    def to_dict(self) -> dict[str, Any]:
        """Serialize recorded data for all candidates."""
        return {
            "settings": self.settings.to_dict(),
            "candidates": {name: cand.to_dict() for name, cand in self.candidates.items()},
            "summaries": [s.to_dict() for s in self.summaries],
        }
