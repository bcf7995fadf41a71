# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models describing checks, macros, and run-level settings."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .paths import contains_fragment, merge_fragments

ARG_PLACEHOLDER: Final[str] = "$1"


def default_simultaneous_runs() -> int:
    """Return twice the available CPU cores plus one."""
    return (os.cpu_count() or 1) * 2 + 1


class CommandSpec(BaseModel):
    """Command name plus argument template for a ``fix``/``check``/``install`` step."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    cmd: str = ""
    args: tuple[str, ...] = Field(default_factory=tuple)

    def render_args(self, target: str) -> list[str]:
        """Return the argument template with every ``$1`` replaced by ``target``.

        Args:
            target: Target identifier substituted for the placeholder.

        Returns:
            list[str]: Fresh argument list; the template itself is untouched.
        """

        return [target if arg == ARG_PLACEHOLDER else arg for arg in self.args]


class TargetLister(BaseModel):
    """External command that prints one candidate target per line."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    cmd: str = ""
    args: tuple[str, ...] = Field(default_factory=tuple)
    ignore_dir: tuple[str, ...] = Field(default_factory=tuple, alias="ignoreDir")

    def is_filtered(self, target: str) -> bool:
        """Return ``True`` when ``target`` should be dropped from the target list.

        Empty candidates are always dropped; otherwise a candidate is dropped
        when one of its path segments equals an ignored fragment.
        """

        if target == "":
            return True
        return contains_fragment(target, self.ignore_dir)

    def with_ignored(self, fragments: Iterable[str]) -> TargetLister:
        """Return a copy whose ignore list also contains ``fragments``."""

        return self.model_copy(update={"ignore_dir": merge_fragments(self.ignore_dir, fragments)})


class CheckSpec(BaseModel):
    """A configured check, or a macro template when stored in the macro mapping."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = ""
    cmd: str = ""
    fix: CommandSpec | None = None
    check: CommandSpec | None = None
    install: CommandSpec | None = None
    gotool: str = ""
    godep: bool | None = None
    macro: str = ""
    each: TargetLister | None = None
    validator_config: dict[str, Any] | None = Field(default=None, alias="validate")

    @property
    def display_name(self) -> str:
        """Return the label used when reporting on this check."""

        return self.name or self.cmd or self.macro or "<unnamed check>"

    @property
    def uses_legacy_deps(self) -> bool:
        """Return ``True`` when invocations may be routed through ``godep``."""

        return bool(self.godep)

    def command_for(self, *, fix: bool) -> CommandSpec | None:
        """Return the sub-command used for an invocation.

        Args:
            fix: ``True`` when the run applies fixes.

        Returns:
            CommandSpec | None: ``fix`` when fixing and available, otherwise ``check``.
        """

        if fix and self.fix is not None:
            return self.fix
        return self.check

    def __str__(self) -> str:
        return (
            f"Name: {self.name} | Cmd: {self.cmd} | Fix: {self.fix} | Check: {self.check} | "
            f"Install: {self.install} | Gotool: {self.gotool} | Macro: {self.macro} | Each: {self.each}"
        )


MacroSpec = dict[str, CheckSpec]


class RunConfig(BaseModel):
    """Parsed configuration document plus the directory it was loaded from."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    checks: tuple[CheckSpec, ...] = Field(default_factory=tuple)
    macros: MacroSpec = Field(default_factory=dict)
    ignore_dir: tuple[str, ...] = Field(default_factory=tuple, alias="ignoreDir")
    simultaneous_runs: int = Field(default=0, alias="simultaneousRuns", validate_default=True)
    root: Path = Field(default_factory=Path)

    @field_validator("simultaneous_runs")
    @classmethod
    def _resolve_simultaneous_runs(cls, value: int) -> int:
        """Replace ``0`` with the CPU-derived default and reject negative limits."""
        if value < 0:
            raise ValueError("simultaneousRuns must be zero (automatic) or a positive integer")
        if value == 0:
            return default_simultaneous_runs()
        return value


@dataclass(frozen=True, slots=True)
class RunOptions:
    """Operator-selected flags applied to a whole run."""

    fix: bool = False
    verbose: bool = False
    emoji: bool = True


__all__ = [
    "ARG_PLACEHOLDER",
    "CheckSpec",
    "CommandSpec",
    "MacroSpec",
    "RunConfig",
    "RunOptions",
    "TargetLister",
    "default_simultaneous_runs",
]
