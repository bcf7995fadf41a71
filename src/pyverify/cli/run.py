# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the `pyverify` command."""

from __future__ import annotations

from pathlib import Path

import typer

from ..config import RunOptions
from ..config_loader import DEFAULT_CONFIG_FILENAME, load_config
from ..errors import ConfigLoadError
from ..logging import RunLogger
from ..orchestration.engine import ExecutionEnvironment
from ..orchestration.runner import run_checks


def run_command(
    config: Path = typer.Option(
        Path(DEFAULT_CONFIG_FILENAME),
        "--config",
        "-c",
        help="Configuration file describing the checks to run.",
    ),
    fix: bool = typer.Option(
        False,
        "--fix/--no-fix",
        help="Also fix the code when a check can.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log each step and mirror tool output to the console.",
    ),
    jobs: int | None = typer.Option(
        None,
        "--jobs",
        "-j",
        min=0,
        help="Override simultaneousRuns; 0 selects 2 x CPU cores + 1.",
    ),
    emoji: bool = typer.Option(
        True,
        "--emoji/--no-emoji",
        help="Toggle emoji in CLI output.",
    ),
) -> None:
    """Run every configured check, exiting non-zero on the first failing check."""

    options = RunOptions(fix=fix, verbose=verbose, emoji=emoji)
    logger = RunLogger(use_emoji=emoji, debug_enabled=verbose)
    try:
        run_config = load_config(config, simultaneous_runs=jobs)
    except ConfigLoadError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc

    logger.debug(f"Loaded {len(run_config.checks)} check(s) from {config} with {run_config.simultaneous_runs} worker(s)")
    environment = ExecutionEnvironment(config=run_config, options=options, logger=logger)
    report = run_checks(environment)
    if not report.ok:
        logger.fail(f"{report.failed_check}: {report.error}")
        raise typer.Exit(code=report.exit_code)
    logger.ok(f"{len(report.reports)} check(s) passed.")
    raise typer.Exit(code=0)


__all__ = ["run_command"]
