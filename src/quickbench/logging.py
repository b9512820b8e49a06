"""Logging setup for the quickbench command line.

Reports go to stdout through ``click.echo``; everything routed through
the ``quickbench`` logger is progress and goes to a separate stream
(stderr by default), so ``quickbench run --json`` output stays parseable.

INFO records are pass summaries (``Finished 100 runs with 2 candidate(s)
in ...``) and are printed bare.  Other levels keep their level name.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

_LOGGER_NAME = "quickbench"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class ProgressFormatter(logging.Formatter):
    """Print INFO progress lines bare and prefix everything else with its level."""

    def __init__(self) -> None:
        super().__init__("%(levelname)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return record.getMessage()
        return super().format(record)


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure and return the quickbench logger.

    Args:
        verbose: Also show per-candidate batches and iterative round estimates.
        quiet: Hide pass summaries; only warnings and errors. Ignored if *verbose*.
        log_file: If provided, also log everything (DEBUG) to this path.
        stream: Progress stream; defaults to the current ``sys.stderr``.

    Returns:
        The configured ``quickbench`` logger.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # The CLI may be invoked repeatedly in one process.
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    if verbose:
        console.setLevel(logging.DEBUG)
    elif quiet:
        console.setLevel(logging.WARNING)
    else:
        console.setLevel(logging.INFO)
    console.setFormatter(ProgressFormatter())
    logger.addHandler(console)

    if log_file is not None:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger
