"""Command-line interface for quickbench.

Provides the ``quickbench`` entry point with a ``run`` subcommand that
benchmarks callables named by ``module:attr`` import targets or by a
YAML profile.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
import yaml

from quickbench import __version__
from quickbench.config import (
    BenchSettings,
    CandidateDef,
    load_profile,
    parse_candidate_spec,
    resolve_callable,
    settings_from_profile,
    validate_settings,
)
from quickbench.logging import setup_logging
from quickbench.registry import QuickBench

log = logging.getLogger("quickbench")


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """quickbench — compare the speed of alternative Python callables."""


@main.command()
@click.argument("targets", nargs=-1)
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, path_type=Path),
    help="YAML profile defining settings and candidates.",
)
@click.option(
    "--runs",
    type=int,
    default=None,
    help="Runs per candidate for a fixed pass (default: 1).",
)
@click.option(
    "--precision",
    type=int,
    default=None,
    help="Decimal digits in the report (default: 10).",
)
@click.option(
    "--iterative",
    "time_limit",
    type=float,
    default=None,
    help="Run growing rounds until this many seconds would be exceeded.",
)
@click.option(
    "--initial-runs",
    type=int,
    default=None,
    help="Runs in the first iterative round (default: 1).",
)
@click.option(
    "--multiplier",
    type=int,
    default=None,
    help="Round size growth factor for iterative runs (default: 10).",
)
@click.option(
    "--compare/--no-compare",
    default=True,
    show_default=True,
    help="Print a ranked comparison table after the results.",
)
@click.option("--json", "as_json", is_flag=True, help="Print recorded data as JSON.")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Also write a DEBUG log to this file.",
)
def run(  # noqa: PLR0913
    targets: tuple[str, ...],
    profile_path: Path | None,
    runs: int | None,
    precision: int | None,
    time_limit: float | None,
    initial_runs: int | None,
    multiplier: int | None,
    compare: bool,
    as_json: bool,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Benchmark callables against each other.

    TARGETS are import paths of the form 'module:attr' or
    'name=module:attr'.  Candidates from TARGETS are added after those
    from --profile; a repeated name replaces the earlier candidate.

    \b
    Examples:
        # Fixed pass: 100000 runs each
        quickbench run --runs 100000 math:sqrt floor=math:floor

        # Adaptive rounds within a 2 second budget
        quickbench run --profile bench.yaml --iterative 2
    """
    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    cli_overrides = {
        "default_runs": runs,
        "precision": precision,
        "time_limit": time_limit,
        "initial_runs": initial_runs,
        "multiplier": multiplier,
    }

    defs: list[CandidateDef] = []
    if profile_path is not None:
        try:
            settings, defs = settings_from_profile(
                load_profile(profile_path), cli_overrides=cli_overrides
            )
        except (ValueError, yaml.YAMLError) as exc:
            click.echo(f"Error: {exc}", err=True)
            raise SystemExit(1) from exc
    else:
        settings = BenchSettings()
        for key, value in cli_overrides.items():
            if value is not None:
                setattr(settings, key, value)

    for problem in validate_settings(settings):
        if problem.severity == "warning":
            log.warning("%s: %s", problem.field, problem.message)
        else:
            raise click.UsageError(f"{problem.field}: {problem.message}")

    try:
        defs.extend(parse_candidate_spec(t) for t in targets)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc

    if not defs:
        raise click.UsageError("At least one of TARGETS or --profile candidates is required.")

    bench = QuickBench(settings)
    for cand_def in defs:
        try:
            callback = resolve_callable(cand_def.target)
        except (ValueError, ImportError, AttributeError, TypeError) as exc:
            raise click.UsageError(f"Candidate '{cand_def.name}': {exc}") from exc
        bench.candidate(cand_def.name, callback, cand_def.arguments)

    # A profile's iterative section only supplies defaults; --iterative selects the mode.
    iterative = time_limit is not None

    log.debug("Benchmarking %d candidate(s): %s", len(bench), ", ".join(bench.names))

    try:
        if iterative:
            bench.run_iterative()
        else:
            bench.run()
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904

    if as_json:
        click.echo(json.dumps(bench.to_dict(), indent=2))
        return

    click.echo(bench.results())
    if compare and len(bench) > 1:
        click.echo()
        click.echo(bench.comparison())
