# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Run-level pipeline: prepare, install, and execute each check in order."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config import CheckSpec, RunConfig
from ..errors import IncompleteCheckError, VerifyError
from ..installs import Which, install_tool_if_needed
from ..logging import RunLogger
from ..macros import apply_macro, lookup_macro, resolve_validator
from ..process_utils import find_executable
from ..validators import CoverageValidator
from .engine import CheckEngine, CheckReport, ExecutionEnvironment, PreparedCheck


@dataclass(slots=True)
class RunReport:
    """Outcome of a whole run across the configured checks."""

    reports: list[CheckReport] = field(default_factory=list)
    error: VerifyError | None = None
    failed_check: str | None = None

    @property
    def ok(self) -> bool:
        """Return ``True`` when every executed check succeeded."""

        return self.error is None

    @property
    def exit_code(self) -> int:
        """Return the process exit status for the run."""

        return 0 if self.ok else 1


def prepare_check(
    check: CheckSpec,
    config: RunConfig,
    *,
    fix: bool,
    logger: RunLogger | None = None,
) -> PreparedCheck:
    """Resolve ``check`` against its macro and attach its validator.

    Args:
        check: Check as parsed from configuration.
        config: Run configuration providing macros and global exclusions.
        fix: ``True`` when the run applies fixes.
        logger: Optional logger for macro-load diagnostics.

    Returns:
        PreparedCheck: Effective check plus validator.

    Raises:
        UnknownMacroError: If the check references an unknown macro.
        IncompleteCheckError: If no runnable sub-command remains after resolution.
        ConfigLoadError: If the validator configuration cannot be decoded.
    """

    template = lookup_macro(check, config.macros)
    resolved = apply_macro(check, template, logger=logger)
    validator = resolve_validator(check, template)
    if isinstance(validator, CoverageValidator):
        validator = validator.with_ignored(config.ignore_dir)
    if resolved.command_for(fix=fix) is None:
        wanted = "fix or check" if fix else "check"
        raise IncompleteCheckError(f"{resolved.display_name}: no {wanted} command configured")
    return PreparedCheck(spec=resolved, validator=validator)


def run_check(
    check: CheckSpec,
    environment: ExecutionEnvironment,
    *,
    engine: CheckEngine | None = None,
    which: Which = find_executable,
) -> CheckReport:
    """Prepare, install, and execute a single check.

    Raises:
        VerifyError: For check-level failures (unknown macro, incomplete
            check, tool discovery or install failure).
    """

    prepared = prepare_check(check, environment.config, fix=environment.options.fix, logger=environment.logger)
    install_tool_if_needed(
        prepared.spec,
        runner=environment.runner,
        root=environment.root,
        which=which,
        logger=environment.logger,
    )
    return (engine or CheckEngine(environment)).run(prepared)


def run_checks(environment: ExecutionEnvironment, *, which: Which = find_executable) -> RunReport:
    """Run every configured check sequentially, stopping at the first failure.

    Args:
        environment: Shared run environment.
        which: Resolver for executables on ``PATH``.

    Returns:
        RunReport: Reports of the checks that ran plus the stopping error, if any.
    """

    engine = CheckEngine(environment)
    run_report = RunReport()
    for check in environment.config.checks:
        try:
            report = run_check(check, environment, engine=engine, which=which)
        except VerifyError as exc:
            run_report.error = exc
            run_report.failed_check = check.display_name
            return run_report
        run_report.reports.append(report)
        if report.error is not None:
            run_report.error = report.error
            run_report.failed_check = report.check_name
            return run_report
        environment.logger.debug(f"Check {report.check_name} passed on {report.results} target(s)")
    return run_report


__all__ = ["RunReport", "prepare_check", "run_check", "run_checks"]
