# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy raised while loading, preparing, and running checks."""

from __future__ import annotations


class VerifyError(Exception):
    """Base class for every error raised by :mod:`pyverify`."""


class ConfigLoadError(VerifyError):
    """Raised when the configuration document is unreadable or malformed."""


class UnknownMacroError(VerifyError):
    """Raised when a check references a macro absent from the mapping."""

    def __init__(self, macro: str) -> None:
        """Record the missing macro name.

        Args:
            macro: Macro identifier referenced by the check.
        """

        super().__init__(f"unable to find macro {macro}")
        self.macro = macro


class IncompleteCheckError(VerifyError):
    """Raised when a resolved check has no command to run."""


class ToolDiscoveryError(VerifyError):
    """Raised when the tool-plugin introspection command fails."""


class InstallError(VerifyError):
    """Raised when a check's install command fails."""


class ProcessExecutionError(VerifyError):
    """Raised when an external command cannot be launched or exits non-zero."""

    def __init__(
        self,
        command: tuple[str, ...],
        returncode: int | None,
        reason: str | None = None,
        *,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        """Capture the failing command, its exit status, and its output.

        Args:
            command: Command sequence that was executed.
            returncode: Exit status, or ``None`` when the launch itself failed.
            reason: Optional launch failure description.
            stdout: Captured standard output, if any.
            stderr: Captured standard error, if any.
        """

        head = command[0] if command else "<empty>"
        if returncode is None:
            message = f"command '{head}' could not be started: {reason or 'unknown error'}"
        else:
            message = f"command '{head}' exited with status {returncode}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    @property
    def output(self) -> str:
        """Return stdout followed by stderr."""

        return self.stdout + self.stderr


class ListerExecutionError(VerifyError):
    """Raised when a target lister command fails."""

    def __init__(self, cause: ProcessExecutionError, output: str) -> None:
        """Attach the captured lister output to the process failure.

        Args:
            cause: Underlying process failure.
            output: Combined stdout and stderr captured from the lister.
        """

        super().__init__(f"target lister failed: {cause}")
        self.cause = cause
        self.output = output


class OutputError(VerifyError):
    """Base class for validator rejections of captured output."""


class NonEmptyStderrError(OutputError):
    """Raised when a command wrote to stderr under the plain output policy."""

    def __init__(self) -> None:
        super().__init__("non empty stderr")


class UnexpectedOutputError(OutputError):
    """Raised when stdout carries a line no ignore message accounts for."""

    def __init__(self, line: str) -> None:
        super().__init__(f"unexpected output: {line}")
        self.line = line


class CoverageBelowThresholdError(OutputError):
    """Raised when reported coverage is below the required percentage."""

    def __init__(self, seen: float, required: float) -> None:
        """Store the observed and required coverage values verbatim.

        Args:
            seen: Coverage percentage parsed from the tool output.
            required: Minimum coverage percentage configured for the check.
        """

        super().__init__(f"Coverage {seen:f} less than required {required:f}")
        self.seen = seen
        self.required = required


class UnparsableCoverageLineError(OutputError):
    """Raised when a coverage output line carries no recognisable percentage."""

    def __init__(self, line: str) -> None:
        super().__init__(f"unable to find match in string: {line}")
        self.line = line


__all__ = [
    "ConfigLoadError",
    "CoverageBelowThresholdError",
    "IncompleteCheckError",
    "InstallError",
    "ListerExecutionError",
    "NonEmptyStderrError",
    "OutputError",
    "ProcessExecutionError",
    "ToolDiscoveryError",
    "UnexpectedOutputError",
    "UnknownMacroError",
    "UnparsableCoverageLineError",
    "VerifyError",
]
