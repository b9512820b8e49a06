"""Text formatting helpers for quickbench reports.

Every function here is pure: it takes recorded data and returns a
string.  Nothing is printed; the caller decides where output goes.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quickbench.candidate import Candidate, Sample
    from quickbench.registry import RunSummary

PER_RUNS = 10000


def format_seconds(seconds: float, precision: int) -> str:
    """Format a duration in seconds with *precision* decimal digits.

    NaN (no data) renders as ``'N/A'``.
    """
    if math.isnan(seconds):
        return "N/A"
    return f"{seconds:.{precision}f}"


def format_summary(summary: RunSummary, precision: int) -> str:
    """Format a registry pass: ``'Finished 100 runs with 2 candidate(s) in 0.01 seconds'``."""
    return (
        f"Finished {summary.run_count} runs with {summary.candidate_count} candidate(s) "
        f"in {format_seconds(summary.elapsed, precision)} seconds"
    )


def format_sample(sample: Sample, precision: int) -> str:
    """Format one sample as a tab-indented ``runs in seconds`` line."""
    elapsed = format_seconds(sample.elapsed, precision)
    return f"\t{sample.run_count:>10d} runs in\t{elapsed} seconds"


def format_candidate_block(name: str, candidate: Candidate, precision: int) -> str:
    """Format the header line and per-sample lines for one candidate."""
    average = format_seconds(candidate.per(PER_RUNS), precision)
    lines = [f"Results for '{name}':\taverage {average} per {PER_RUNS} runs"]
    if candidate.samples:
        lines.append(candidate.results(precision))
    return "\n".join(lines)


def format_table(
    headers: list[str],
    rows: list[list[str]],
    *,
    alignments: list[str] | None = None,
    indent: int = 2,
) -> str:
    """Format rows as the aligned table used by the comparison report.

    The header is underlined with a ``'─'`` rule as wide as each column.
    Columns marked ``'r'`` in *alignments* are right-aligned so the
    rank, time, run count and relative-speed figures line up on their
    last digit; candidate names stay left-aligned.  Short rows are
    padded with empty cells and trailing blanks are stripped.
    """
    if not headers:
        return ""

    ncols = len(headers)
    aligns = list(alignments or [])
    while len(aligns) < ncols:
        aligns.append("l")

    proc_rows: list[list[str]] = []
    for row in rows:
        padded = list(row) + [""] * (ncols - len(row))
        proc_rows.append(padded[:ncols])

    widths = [len(h) for h in headers]
    for row in proc_rows:
        for ci, cell in enumerate(row):
            widths[ci] = max(widths[ci], len(cell))

    def _cell(text: str, ci: int) -> str:
        if aligns[ci] == "r":
            return text.rjust(widths[ci])
        return text.ljust(widths[ci])

    prefix = " " * indent
    lines = [prefix + "  ".join(_cell(h, ci) for ci, h in enumerate(headers)).rstrip()]
    lines.append(prefix + "  ".join("─" * w for w in widths))
    for row in proc_rows:
        lines.append(prefix + "  ".join(_cell(c, ci) for ci, c in enumerate(row)).rstrip())
    return "\n".join(lines)


def format_comparison(rows: list[tuple[str, float, int]], precision: int) -> str:
    """Format a ranked comparison of candidates.

    Args:
        rows: ``(name, seconds per PER_RUNS runs, total runs)`` tuples,
            already sorted fastest first.
        precision: Decimal digits for the time column.

    Returns:
        An aligned table, or an empty string if *rows* is empty.
    """
    if not rows:
        return ""

    fastest = rows[0][1]
    table_rows: list[list[str]] = []
    for rank, (name, cost, runs) in enumerate(rows, start=1):
        if fastest > 0:
            relative = f"{cost / fastest:.2f}x"
        else:
            relative = "-"
        table_rows.append(
            [str(rank), name, format_seconds(cost, precision), str(runs), relative]
        )

    return format_table(
        ["#", "Candidate", f"s/{PER_RUNS} runs", "Runs", "Relative"],
        table_rows,
        alignments=["r", "l", "r", "r", "r"],
    )
