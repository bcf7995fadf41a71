# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Target enumeration through external lister commands."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Final

from .config import CheckSpec, TargetLister
from .core.runtime.process import CommandOptions
from .errors import ListerExecutionError, ProcessExecutionError
from .process_utils import CommandRunner, run_checked

IMPLICIT_TARGET: Final[str] = "."


def list_targets(
    lister: TargetLister,
    *,
    root: Path,
    runner: CommandRunner,
) -> list[str]:
    """Run ``lister`` inside ``root`` and return its unfiltered-out targets.

    Args:
        lister: Lister command together with its ignored directory fragments.
        root: Run root used as the lister's working directory.
        runner: Command runner used to launch the lister.

    Returns:
        list[str]: Targets in the order the lister printed them.

    Raises:
        ListerExecutionError: If the lister cannot be started or fails.
    """

    try:
        completed = run_checked(
            [lister.cmd, *lister.args],
            runner=runner,
            options=CommandOptions(cwd=root),
        )
    except ProcessExecutionError as exc:
        raise ListerExecutionError(exc, exc.output) from exc
    return [line for line in (completed.stdout or "").splitlines() if not lister.is_filtered(line)]


def enumerate_targets(
    check: CheckSpec,
    *,
    root: Path,
    global_ignore: Iterable[str],
    runner: CommandRunner,
) -> list[str]:
    """Return the targets ``check`` should run against.

    A check without a lister runs once against :data:`IMPLICIT_TARGET`.
    Otherwise the check's ignored fragments are unioned with ``global_ignore``
    before filtering the lister output.

    Args:
        check: Resolved check.
        root: Run root used as the lister's working directory.
        global_ignore: Run-wide ignored directory fragments.
        runner: Command runner used to launch the lister.

    Returns:
        list[str]: Targets in enumeration order.
    """

    if check.each is None:
        return [IMPLICIT_TARGET]
    lister = check.each.with_ignored(global_ignore)
    return list_targets(lister, root=root, runner=runner)


__all__ = ["IMPLICIT_TARGET", "enumerate_targets", "list_targets"]
