"""quickbench — quick micro-benchmarks for comparing Python callables.

Register named candidates on a :class:`QuickBench`, run them a fixed
number of times or iteratively within a time budget, and read back the
per-10000-runs averages.
"""

from __future__ import annotations

__version__ = "0.1.0"

from quickbench.candidate import Candidate, Sample  # noqa: E402
from quickbench.registry import QuickBench, RunSummary, flatten  # noqa: E402

__all__ = [
    "Candidate",
    "QuickBench",
    "RunSummary",
    "Sample",
    "__version__",
    "flatten",
]
