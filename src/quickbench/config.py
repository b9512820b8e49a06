"""Benchmark settings, validation and YAML profile loading.

Handles:
- The :class:`BenchSettings` defaults a registry falls back to.
- Validating settings before a benchmark starts.
- Loading benchmark profiles (settings plus candidates) from YAML.
- Resolving ``module:attr`` import targets to callables.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml

log = logging.getLogger("quickbench")


# ---------------------------------------------------------------------------
# BenchSettings
# ---------------------------------------------------------------------------


@dataclass
class BenchSettings:
    """Defaults for a benchmarking session."""

    default_runs: int = 1  # used when run() gets no positive count
    precision: int = 10  # decimal digits in reports only

    # run_iterative() defaults
    time_limit: float = 1.0  # seconds
    initial_runs: int = 1
    multiplier: int = 10

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return asdict(self)


@dataclass
class CandidateDef:
    """A candidate declared by import target rather than by object."""

    name: str
    target: str  # "module:attr"
    arguments: list[Any] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

# Expected type of each BenchSettings field.
_SETTING_TYPES: dict[str, type] = {
    "default_runs": int,
    "precision": int,
    "time_limit": float,
    "initial_runs": int,
    "multiplier": int,
}
_KIND_NAMES = {int: "an integer", float: "a number"}


def _is_kind(value: Any, kind: type) -> bool:
    """Check *value* against *kind*; bools are rejected and ints count as floats."""
    if isinstance(value, bool):
        return False
    if kind is float:
        return isinstance(value, (int, float))
    return isinstance(value, kind)


@dataclass
class ValidationError:
    """A single settings validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_settings(settings: BenchSettings) -> list[ValidationError]:
    """Validate benchmark settings.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    for name, kind in _SETTING_TYPES.items():
        value = getattr(settings, name)
        if not _is_kind(value, kind):
            errors.append(
                ValidationError(
                    field=name,
                    message=f"Must be {_KIND_NAMES[kind]} (got {value!r}).",
                )
            )
    if errors:
        # Range checks below assume numeric values.
        return errors

    if settings.default_runs <= 0:
        errors.append(
            ValidationError(
                field="default_runs",
                message=f"Default run count must be positive (got {settings.default_runs}).",
            )
        )

    if settings.precision < 0:
        errors.append(
            ValidationError(
                field="precision",
                message=f"Precision cannot be negative (got {settings.precision}).",
            )
        )

    if settings.time_limit <= 0:
        errors.append(
            ValidationError(
                field="time_limit",
                message=f"Time limit must be positive (got {settings.time_limit}).",
            )
        )

    if settings.initial_runs <= 0:
        errors.append(
            ValidationError(
                field="initial_runs",
                message=f"Initial run count must be positive (got {settings.initial_runs}).",
            )
        )

    # Below 1 the round sizes shrink and the loop never reaches the limit.
    if settings.multiplier < 1:
        errors.append(
            ValidationError(
                field="multiplier",
                message=f"Multiplier must be at least 1 (got {settings.multiplier}).",
            )
        )
    elif settings.multiplier == 1:
        errors.append(
            ValidationError(
                field="multiplier",
                message=(
                    "Multiplier 1 repeats the same round size; "
                    "the iterative run will take many rounds."
                ),
                severity="warning",
            )
        )

    return errors


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load a benchmark profile from a YAML file.

    Profile format::

        runs: 1000
        precision: 5
        iterative:
          time_limit: 4
          initial_runs: 10000
          multiplier: 100
        candidates:
          contains:
            target: "operator:contains"
            args: [["a", "b", "c"], "c"]

    Returns:
        The parsed YAML as a dict.
    """
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text())

    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")

    return data


def settings_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> tuple[BenchSettings, list[CandidateDef]]:
    """Build settings and candidate definitions from a parsed profile.

    CLI overrides take precedence over profile values.  Override keys
    match :class:`BenchSettings` field names; ``None`` means "not given".

    Returns:
        ``(settings, candidate_defs)``.
    """
    cli = {k: v for k, v in (cli_overrides or {}).items() if v is not None}

    iterative = profile_data.get("iterative") or {}
    if not isinstance(iterative, dict):
        raise ValueError("Profile 'iterative' must be a mapping")

    # Profile keys for each BenchSettings field.
    sources = {
        "default_runs": ("runs", profile_data),
        "precision": ("precision", profile_data),
        "time_limit": ("time_limit", iterative),
        "initial_runs": ("initial_runs", iterative),
        "multiplier": ("multiplier", iterative),
    }
    settings = BenchSettings()
    for name, (key, section) in sources.items():
        if name in cli:
            setattr(settings, name, cli[name])
        elif key in section:
            value = section[key]
            kind = _SETTING_TYPES[name]
            if not _is_kind(value, kind):
                raise ValueError(
                    f"Profile '{key}' must be {_KIND_NAMES[kind]}, got {value!r}"
                )
            setattr(settings, name, value)

    candidates_data = profile_data.get("candidates") or {}
    if not isinstance(candidates_data, dict):
        raise ValueError("Profile 'candidates' must be a mapping of name -> definition")

    defs: list[CandidateDef] = []
    for name, cand_data in candidates_data.items():
        if isinstance(cand_data, str):
            cand_data = {"target": cand_data}
        if not isinstance(cand_data, dict):
            raise ValueError(
                f"Candidate '{name}' must be a mapping or a target string, "
                f"got {type(cand_data).__name__}"
            )
        target = cand_data.get("target")
        if not target:
            raise ValueError(f"Candidate '{name}' has no target.")
        args = cand_data.get("args", [])
        if not isinstance(args, list):
            raise ValueError(f"Candidate '{name}' args must be a list.")
        defs.append(CandidateDef(name=str(name), target=target, arguments=args))

    return settings, defs


# ---------------------------------------------------------------------------
# Import targets
# ---------------------------------------------------------------------------


def parse_candidate_spec(spec: str) -> CandidateDef:
    """Parse a CLI candidate: ``"name=module:attr"`` or ``"module:attr"``.

    Without an explicit name the target itself is used as the name.
    """
    name, sep, target = spec.partition("=")
    if not sep:
        name, target = spec, spec
    name = name.strip()
    target = target.strip()
    if not name:
        raise ValueError(f"Invalid candidate spec: '{spec}'. Name cannot be empty.")
    _split_target(target)
    return CandidateDef(name=name, target=target)


def _split_target(target: str) -> tuple[str, str]:
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Invalid target: '{target}'. Expected format: 'module:attr'")
    return module_name, attr_path


def resolve_callable(target: str) -> Callable[..., Any]:
    """Import the object named by a ``module:attr`` target.

    Dotted attribute paths (``"pkg.mod:Class.method"``) are followed.

    Raises:
        ValueError: Malformed target.
        ImportError: The module cannot be imported.
        AttributeError: The attribute does not exist.
        TypeError: The resolved object is not callable.
    """
    module_name, attr_path = _split_target(target)
    obj: Any = importlib.import_module(module_name)
    for part in attr_path.split("."):
        obj = getattr(obj, part)
    if not callable(obj):
        raise TypeError(f"Target '{target}' is not callable ({type(obj).__name__}).")
    log.debug("Resolved %s -> %r", target, obj)
    return obj
