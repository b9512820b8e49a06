"""Tests for quickbench.candidate — timed execution and per-N averages."""

from __future__ import annotations

import math
import unittest
from unittest import mock

from bench_test_helpers import CallRecorder, FakeClock, make_candidate, noop

from quickbench.candidate import Candidate, Sample


# ---------------------------------------------------------------------------
# Sample tests
# ---------------------------------------------------------------------------


class TestSample(unittest.TestCase):
    """Tests for the Sample record."""

    def test_fields(self) -> None:
        s = Sample(elapsed=0.25, run_count=100)
        self.assertEqual(s.elapsed, 0.25)
        self.assertEqual(s.run_count, 100)

    def test_zero_run_count_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Sample(elapsed=0.1, run_count=0)

    def test_negative_elapsed_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Sample(elapsed=-0.1, run_count=1)

    def test_immutable(self) -> None:
        s = Sample(elapsed=0.1, run_count=1)
        with self.assertRaises(AttributeError):
            s.run_count = 2  # type: ignore[misc]

    def test_to_dict(self) -> None:
        s = Sample(elapsed=0.5, run_count=10)
        self.assertEqual(s.to_dict(), {"elapsed": 0.5, "run_count": 10})


# ---------------------------------------------------------------------------
# Candidate.run tests
# ---------------------------------------------------------------------------


class TestCandidateRun(unittest.TestCase):
    """Tests for Candidate.run()."""

    def test_non_callable_rejected(self) -> None:
        with self.assertRaises(TypeError):
            Candidate(callback="not callable")  # type: ignore[arg-type]

    def test_arguments_stored_as_tuple(self) -> None:
        cand = Candidate(callback=noop, arguments=[1, 2])  # type: ignore[arg-type]
        self.assertEqual(cand.arguments, (1, 2))

    def test_invokes_callback_run_count_times(self) -> None:
        recorder = CallRecorder()
        cand = Candidate(callback=recorder, arguments=("needle", ["hay"]))
        cand.run(5)
        self.assertEqual(len(recorder.calls), 5)
        for args in recorder.calls:
            self.assertEqual(args, ("needle", ["hay"]))

    def test_appends_one_sample(self) -> None:
        cand = Candidate(callback=noop)
        cand.run(7)
        self.assertEqual(len(cand.samples), 1)
        self.assertEqual(cand.samples[0].run_count, 7)
        self.assertGreaterEqual(cand.samples[0].elapsed, 0.0)

    def test_samples_accumulate_in_order(self) -> None:
        cand = Candidate(callback=noop)
        cand.run(1).run(10).run(100)
        self.assertEqual([s.run_count for s in cand.samples], [1, 10, 100])

    def test_returns_self(self) -> None:
        cand = Candidate(callback=noop)
        self.assertIs(cand.run(1), cand)

    def test_single_timer_pair_per_batch(self) -> None:
        """The batch is timed once, not per call."""
        clock = FakeClock(step=0.5)
        cand = Candidate(callback=noop)
        with mock.patch("quickbench.candidate.time.perf_counter", clock):
            cand.run(1000)
        self.assertEqual(clock.calls, 2)
        self.assertAlmostEqual(cand.samples[0].elapsed, 0.5)

    def test_zero_run_count_is_noop(self) -> None:
        recorder = CallRecorder()
        cand = Candidate(callback=recorder)
        with self.assertLogs("quickbench", level="WARNING"):
            cand.run(0)
        self.assertEqual(cand.samples, [])
        self.assertEqual(recorder.calls, [])

    def test_negative_run_count_is_noop(self) -> None:
        cand = Candidate(callback=noop)
        with self.assertLogs("quickbench", level="WARNING"):
            self.assertIs(cand.run(-3), cand)
        self.assertEqual(cand.samples, [])

    def test_callback_exception_propagates(self) -> None:
        def boom() -> None:
            raise RuntimeError("boom")

        cand = Candidate(callback=boom)
        with self.assertRaises(RuntimeError):
            cand.run(3)
        self.assertEqual(cand.samples, [])


# ---------------------------------------------------------------------------
# Aggregation tests
# ---------------------------------------------------------------------------


class TestCandidatePer(unittest.TestCase):
    """Tests for Candidate.per() and totals."""

    def test_totals(self) -> None:
        cand = make_candidate([(0.5, 100), (1.5, 300)])
        self.assertAlmostEqual(cand.total_elapsed, 2.0)
        self.assertEqual(cand.total_runs, 400)

    def test_per_uses_all_samples(self) -> None:
        cand = make_candidate([(0.5, 100), (1.5, 300)])
        self.assertAlmostEqual(cand.per(400), 2.0)
        self.assertAlmostEqual(cand.per(10000), 50.0)

    def test_per_is_linear(self) -> None:
        cand = make_candidate([(0.013, 70), (0.2, 900)])
        for n in (1, 10, 10000):
            self.assertAlmostEqual(cand.per(2 * n), 2 * cand.per(n))

    def test_per_without_samples_is_nan(self) -> None:
        cand = Candidate(callback=noop)
        self.assertTrue(math.isnan(cand.per(10000)))

    def test_per_after_discard_is_nan(self) -> None:
        cand = make_candidate([(0.5, 100)])
        cand.discard_samples()
        self.assertTrue(math.isnan(cand.per(10000)))

    def test_identity_end_to_end(self) -> None:
        cand = Candidate(callback=noop)
        cand.run(1000)
        self.assertEqual(len(cand.samples), 1)
        self.assertEqual(cand.samples[0].run_count, 1000)
        self.assertAlmostEqual(cand.per(10000), cand.samples[0].elapsed * 10)


class TestCandidateDiscard(unittest.TestCase):
    """Tests for Candidate.discard_samples()."""

    def test_discard_clears(self) -> None:
        cand = make_candidate([(0.5, 100), (0.1, 10)])
        self.assertIs(cand.discard_samples(), cand)
        self.assertEqual(cand.samples, [])

    def test_discard_idempotent(self) -> None:
        cand = Candidate(callback=noop)
        cand.discard_samples().discard_samples()
        self.assertEqual(cand.samples, [])


class TestCandidateResults(unittest.TestCase):
    """Tests for Candidate.results() and to_dict()."""

    def test_one_line_per_sample(self) -> None:
        cand = make_candidate([(0.25, 1000), (2.5, 10000)])
        self.assertEqual(
            cand.results(3),
            "\t      1000 runs in\t0.250 seconds\n\t     10000 runs in\t2.500 seconds",
        )

    def test_precision_only_affects_text(self) -> None:
        cand = make_candidate([(0.123456, 10)])
        self.assertIn("0.12 seconds", cand.results(2))
        self.assertEqual(cand.samples[0].elapsed, 0.123456)

    def test_no_samples_empty(self) -> None:
        self.assertEqual(Candidate(callback=noop).results(5), "")

    def test_to_dict(self) -> None:
        cand = make_candidate([(0.5, 100), (1.5, 300)])
        data = cand.to_dict()
        self.assertEqual(data["total_runs"], 400)
        self.assertAlmostEqual(data["total_elapsed"], 2.0)
        self.assertEqual(len(data["samples"]), 2)
