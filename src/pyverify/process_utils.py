# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Execution helpers for invoking external commands in a controlled manner."""

from __future__ import annotations

from collections.abc import Sequence
from shutil import which as _which
from subprocess import CompletedProcess
from typing import Protocol, runtime_checkable

from .core.runtime.process import CommandOptions
from .core.runtime.process import run_command as _run_command
from .errors import ProcessExecutionError


@runtime_checkable
class CommandRunner(Protocol):
    """Callable protocol for invoking external commands.

    The default implementation is :func:`run_command`; tests substitute fakes
    returning canned :class:`~subprocess.CompletedProcess` objects.
    """

    def __call__(
        self,
        cmd: Sequence[str],
        *,
        options: CommandOptions | None = None,
    ) -> CompletedProcess[str]:
        """Execute ``cmd`` returning a completed subprocess.

        Args:
            cmd: Command to execute including executable and arguments.
            options: Optional command execution configuration.

        Returns:
            CompletedProcess[str]: Completed subprocess with captured output.
        """

        raise NotImplementedError


def find_executable(cmd: str) -> str | None:
    """Return the fully-qualified path to ``cmd`` if it exists on ``PATH``.

    Args:
        cmd: Executable name to resolve.

    Returns:
        str | None: Absolute path to the executable, or ``None`` when not found.
    """

    if not cmd:
        return None
    return _which(cmd)


def run_command(
    cmd: Sequence[str],
    *,
    options: CommandOptions | None = None,
) -> CompletedProcess[str]:
    """Run ``cmd`` with output captured and stdin detached.

    Args:
        cmd: Command arguments where the first item is the executable.
        options: Baseline command options.

    Returns:
        CompletedProcess[str]: Completed process with stdout and stderr captured.
    """

    return _run_command(cmd, options=options or CommandOptions())


def run_checked(
    cmd: Sequence[str],
    *,
    runner: CommandRunner,
    options: CommandOptions | None = None,
) -> CompletedProcess[str]:
    """Run ``cmd`` through ``runner`` and insist on a zero exit status.

    Args:
        cmd: Command arguments where the first item is the executable.
        runner: Command runner used to launch the process.
        options: Command options forwarded to the runner.

    Returns:
        CompletedProcess[str]: Completed process for a successful invocation.

    Raises:
        ProcessExecutionError: If the process could not be started or exited
            with a non-zero status. Captured output travels with the error.
    """

    command = tuple(cmd)
    if not command:
        raise ProcessExecutionError(command, None, "empty command")
    try:
        completed = runner(command, options=options)
    except OSError as exc:
        raise ProcessExecutionError(command, None, str(exc)) from exc
    if completed.returncode != 0:
        raise ProcessExecutionError(
            command,
            completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
    return completed


__all__ = [
    "CommandOptions",
    "CommandRunner",
    "ProcessExecutionError",
    "find_executable",
    "run_checked",
    "run_command",
]
