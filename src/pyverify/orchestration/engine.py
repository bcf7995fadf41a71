# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Bounded worker pool that runs one check against all of its targets.

Targets are loaded into a pending queue that a fixed number of workers drain
first-come. Every worker posts its results to a shared result queue followed
by a completion marker; the consumer stops reading once it has seen one marker
per worker, so the stream closes only after every worker has finished.
"""

from __future__ import annotations

import queue
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Final

from ..config import CheckSpec, RunConfig, RunOptions
from ..core.runtime.process import CommandOptions
from ..discovery import enumerate_targets
from ..errors import IncompleteCheckError, ListerExecutionError, OutputError, ProcessExecutionError, VerifyError
from ..logging import RunLogger
from ..process_utils import CommandRunner, run_checked, run_command
from ..validators import Validator

LEGACY_DEP_MARKER: Final[str] = "Godeps"
LEGACY_DEP_WRAPPER: Final[str] = "godep"


@dataclass(frozen=True, slots=True)
class PreparedCheck:
    """A macro-resolved check with its validator attached."""

    spec: CheckSpec
    validator: Validator

    @property
    def name(self) -> str:
        """Return the check's display name."""

        return self.spec.display_name


@dataclass(frozen=True, slots=True)
class InvocationResult:
    """Outcome of running a check against one target."""

    check_name: str
    target: str
    output: str = ""
    error: VerifyError | None = None
    attempts: int = 1

    @property
    def failed(self) -> bool:
        """Return ``True`` when the invocation did not succeed."""

        return self.error is not None

    def __str__(self) -> str:
        return f"{self.check_name}\n{self.error}\n{self.output}"


@dataclass(slots=True)
class CheckReport:
    """Aggregate of every result drained for one check."""

    check_name: str
    results: int = 0
    failures: int = 0
    error: VerifyError | None = None

    @property
    def ok(self) -> bool:
        """Return ``True`` when no target failed."""

        return self.error is None


@dataclass(frozen=True, slots=True)
class ExecutionEnvironment:
    """Everything a worker needs that is shared across one run."""

    config: RunConfig
    options: RunOptions
    runner: CommandRunner = run_command
    logger: RunLogger = field(default_factory=RunLogger)

    @property
    def root(self) -> Path:
        """Return the run root used as every child's working directory."""

        return self.config.root

    def command_options(self) -> CommandOptions:
        """Return process options, mirroring output when running verbosely."""

        if self.options.verbose:
            return CommandOptions(
                cwd=self.root,
                stdout_mirror=self.logger.mirror_stdout,
                stderr_mirror=self.logger.mirror_stderr,
            )
        return CommandOptions(cwd=self.root)


class _WorkerDone:
    """Completion marker posted once by each worker."""


_WORKER_DONE: Final[_WorkerDone] = _WorkerDone()


class CheckEngine:
    """Execute prepared checks against their targets with bounded concurrency."""

    def __init__(self, environment: ExecutionEnvironment) -> None:
        """Bind the engine to a run environment.

        Args:
            environment: Shared configuration, flags, runner, and logger.
        """

        self._env = environment

    @property
    def concurrency_limit(self) -> int:
        """Return the number of workers started per check."""

        return self._env.config.simultaneous_runs

    def build_command(self, check: PreparedCheck, target: str) -> list[str]:
        """Return the concrete command line for ``target``.

        Args:
            check: Prepared check being executed.
            target: Target substituted for every ``$1`` argument.

        Returns:
            list[str]: Executable followed by its arguments.

        Raises:
            IncompleteCheckError: If the check carries no runnable sub-command.
        """

        spec = check.spec
        sub_command = spec.command_for(fix=self._env.options.fix)
        if sub_command is None:
            raise IncompleteCheckError(f"{check.name}: no check command configured")
        args = sub_command.render_args(target)
        executable = sub_command.cmd or spec.cmd
        if spec.uses_legacy_deps and (self._env.root / LEGACY_DEP_MARKER).is_dir():
            return [LEGACY_DEP_WRAPPER, executable, *args]
        return [executable, *args]

    def invoke(self, check: PreparedCheck, target: str) -> InvocationResult:
        """Run a single attempt of ``check`` against ``target``.

        A failing process short-circuits the validator; otherwise the
        validator decides.
        """

        try:
            command = self.build_command(check, target)
        except IncompleteCheckError as exc:
            return InvocationResult(check_name=check.name, target=target, error=exc)
        self._env.logger.debug(f"Running command {command} for {check.name}")
        try:
            completed = run_checked(command, runner=self._env.runner, options=self._env.command_options())
        except ProcessExecutionError as exc:
            return InvocationResult(check_name=check.name, target=target, output=exc.output, error=exc)
        stdout = completed.stdout or ""
        stderr = completed.stderr or ""
        output = stdout + stderr
        try:
            check.validator.check(stdout, stderr)
        except OutputError as exc:
            return InvocationResult(check_name=check.name, target=target, output=output, error=exc)
        return InvocationResult(check_name=check.name, target=target, output=output)

    def run_target(self, check: PreparedCheck, target: str) -> InvocationResult:
        """Run ``check`` against ``target``, retrying once through ``fix`` in fix mode."""

        result = self.invoke(check, target)
        if result.failed and self._env.options.fix and check.spec.fix is not None:
            result = replace(self.invoke(check, target), attempts=2)
        return result

    def stream(self, check: PreparedCheck) -> Iterator[InvocationResult]:
        """Yield one result per target as workers complete them.

        Args:
            check: Prepared check to execute.

        Yields:
            InvocationResult: Results in completion order. An enumeration
            failure yields a single synthetic failed result instead.
        """

        self._env.logger.debug(f"Running check `{check.spec}`")
        try:
            targets = enumerate_targets(
                check.spec,
                root=self._env.root,
                global_ignore=self._env.config.ignore_dir,
                runner=self._env.runner,
            )
        except ListerExecutionError as exc:
            yield InvocationResult(check_name=check.name, target="", output=exc.output, error=exc)
            return

        pending: queue.Queue[str] = queue.Queue()
        for target in targets:
            pending.put(target)
        results: queue.Queue[InvocationResult | _WorkerDone] = queue.Queue()

        workers = self.concurrency_limit
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pyverify-worker") as executor:
            futures = [executor.submit(self._work, check, pending, results) for _ in range(workers)]
            finished = 0
            while finished < workers:
                item = results.get()
                if isinstance(item, _WorkerDone):
                    finished += 1
                    continue
                yield item
            for future in futures:
                future.result()

    def _work(
        self,
        check: PreparedCheck,
        pending: queue.Queue[str],
        results: queue.Queue[InvocationResult | _WorkerDone],
    ) -> None:
        """Drain ``pending`` until empty, posting each result and a final marker."""

        try:
            while True:
                try:
                    target = pending.get_nowait()
                except queue.Empty:
                    return
                results.put(self.run_target(check, target))
        finally:
            results.put(_WORKER_DONE)

    def run(self, check: PreparedCheck) -> CheckReport:
        """Drain every result for ``check`` and report the last failure seen.

        All targets are attempted even when early ones fail. The trimmed
        output of each failing result is printed as it arrives; only the last
        failure to arrive becomes the check's error.

        Args:
            check: Prepared check to execute.

        Returns:
            CheckReport: Counts plus the last observed failure, if any.
        """

        report = CheckReport(check_name=check.name)
        logger = self._env.logger
        for result in self.stream(check):
            report.results += 1
            if not result.failed:
                continue
            report.failures += 1
            report.error = result.error
            location = f" ({result.target})" if result.target else ""
            logger.fail(f"{result.check_name}{location}: {result.error}")
            trimmed = result.output.strip()
            if trimmed:
                logger.echo(trimmed)
        return report


__all__ = [
    "LEGACY_DEP_MARKER",
    "LEGACY_DEP_WRAPPER",
    "CheckEngine",
    "CheckReport",
    "ExecutionEnvironment",
    "InvocationResult",
    "PreparedCheck",
]
