# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Installer helpers that fetch a check's tool when it is missing."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .config import CheckSpec
from .core.runtime.process import CommandOptions
from .errors import InstallError, ProcessExecutionError, ToolDiscoveryError
from .logging import RunLogger
from .process_utils import CommandRunner, find_executable, run_checked

TOOL_LIST_COMMAND: Final[tuple[str, ...]] = ("go", "tool")

Which = Callable[[str], str | None]


@dataclass(frozen=True, slots=True)
class InstallOutcome:
    """Summary of the presence checks and whether an install ran."""

    tool_found: bool
    command_found: bool
    installed: bool


def available_tool_plugins(*, runner: CommandRunner, root: Path | None = None) -> frozenset[str]:
    """Return the tool-plugin names reported by ``go tool``.

    Raises:
        ToolDiscoveryError: If the introspection command fails.
    """

    try:
        completed = run_checked(TOOL_LIST_COMMAND, runner=runner, options=CommandOptions(cwd=root))
    except ProcessExecutionError as exc:
        raise ToolDiscoveryError(f"unable to list tool plugins: {exc}") from exc
    output = (completed.stdout or "") + (completed.stderr or "")
    return frozenset(line for line in output.splitlines() if line)


def install_tool_if_needed(
    check: CheckSpec,
    *,
    runner: CommandRunner,
    root: Path | None = None,
    which: Which = find_executable,
    logger: RunLogger | None = None,
) -> InstallOutcome:
    """Ensure the tool ``check`` depends on is present, installing it once if not.

    Args:
        check: Resolved check.
        runner: Command runner used for introspection and installation.
        root: Working directory for the spawned commands.
        which: Resolver for executables on ``PATH``.
        logger: Optional logger receiving a debug note before installing.

    Returns:
        InstallOutcome: Lookup results and whether the install command ran.

    Raises:
        ToolDiscoveryError: If the tool-plugin introspection command fails.
        InstallError: If the install command fails.
    """

    tool_found = True
    if check.gotool:
        tool_found = check.gotool in available_tool_plugins(runner=runner, root=root)
    command_found = which(check.cmd) is not None
    install = check.install
    if install is None or (tool_found and command_found):
        return InstallOutcome(tool_found=tool_found, command_found=command_found, installed=False)

    if logger is not None:
        logger.debug(f"Installing {install.cmd} {list(install.args)}")
    try:
        run_checked([install.cmd, *install.args], runner=runner, options=CommandOptions(cwd=root))
    except ProcessExecutionError as exc:
        raise InstallError(f"{check.display_name}: install failed: {exc}") from exc
    return InstallOutcome(tool_found=tool_found, command_found=command_found, installed=True)


__all__ = [
    "InstallOutcome",
    "TOOL_LIST_COMMAND",
    "available_tool_plugins",
    "install_tool_if_needed",
]
