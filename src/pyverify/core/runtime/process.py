# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shutil

# Bandit: subprocess runs without a shell; arguments are passed as a list.
import subprocess  # nosec B404 suppression_valid: Shell-free subprocess wrapper enforces safe execution.
import threading
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import IO, Final, TypeAlias

StreamMirror: TypeAlias = Callable[[str], None]

# Child output is decoded leniently; undecodable bytes become U+FFFD.
_OUTPUT_ENCODING: Final[str] = "utf-8"
_DECODE_ERRORS: Final[str] = "replace"


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Immutable command execution options."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    capture_output: bool = True
    discard_stdin: bool = True
    stdout_mirror: StreamMirror | None = None
    stderr_mirror: StreamMirror | None = None

    @property
    def mirrored(self) -> bool:
        """Return ``True`` when either output stream is echoed while running."""

        return self.stdout_mirror is not None or self.stderr_mirror is not None


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Normalise the subprocess argument sequence.

    Args:
        args: Raw command arguments supplied by the caller.

    Returns:
        list[str]: Validated argument list suitable for subprocess execution.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


class _Pump(threading.Thread):
    """Drain one child stream into ``sink``, echoing each line through ``mirror``.

    The stream is always read to EOF so the child never blocks on a full pipe.
    A mirror that raises is detached and its error kept for the caller.
    """

    def __init__(self, stream: IO[str], sink: list[str], mirror: StreamMirror | None) -> None:
        super().__init__(daemon=True)
        self._stream = stream
        self._sink = sink
        self._mirror = mirror
        self.error: Exception | None = None

    def run(self) -> None:
        try:
            for line in iter(self._stream.readline, ""):
                self._sink.append(line)
                if self._mirror is None:
                    continue
                try:
                    self._mirror(line)
                except Exception as exc:  # noqa: BLE001 - re-raised by _run_mirrored
                    self.error = exc
                    self._mirror = None
        finally:
            self._stream.close()


def _run_mirrored(normalized: list[str], options: CommandOptions) -> CompletedProcess[str]:
    """Run ``normalized`` while teeing both output streams to their mirrors."""

    # Bandit: commands originate from vetted check configurations; no shell expansion.
    process = subprocess.Popen(  # nosec B603 - controlled arguments, not user supplied
        normalized,
        cwd=str(options.cwd) if options.cwd is not None else None,
        env=dict(options.env) if options.env is not None else None,
        stdin=subprocess.DEVNULL if options.discard_stdin else None,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        encoding=_OUTPUT_ENCODING,
        errors=_DECODE_ERRORS,
    )
    stdout_chunks: list[str] = []
    stderr_chunks: list[str] = []
    if process.stdout is None or process.stderr is None:  # pragma: no cover - PIPE always yields streams
        raise RuntimeError("subprocess pipes were not created")
    pumps = (
        _Pump(process.stdout, stdout_chunks, options.stdout_mirror),
        _Pump(process.stderr, stderr_chunks, options.stderr_mirror),
    )
    for pump in pumps:
        pump.start()
    returncode = process.wait()
    for pump in pumps:
        pump.join()
    for pump in pumps:
        if pump.error is not None:
            raise pump.error
    return CompletedProcess(
        args=normalized,
        returncode=returncode,
        stdout="".join(stdout_chunks),
        stderr="".join(stderr_chunks),
    )


def run_command(
    args: Sequence[str],
    *,
    options: CommandOptions | None = None,
) -> CompletedProcess[str]:
    """Execute ``args`` after normalising the executable path.

    The call never raises on a non-zero exit status; callers inspect
    ``returncode`` themselves. There is no timeout: a hung child
    blocks the caller until it exits.

    Args:
        args: Command and argument sequence to execute.
        options: Options configuring working directory, environment, and mirroring.

    Returns:
        CompletedProcess: Subprocess execution metadata with text output.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
        OSError: If the operating system refuses to start the process.
    """

    normalized = _normalize_args(args)
    resolved_options = options or CommandOptions()
    if resolved_options.mirrored:
        return _run_mirrored(normalized, resolved_options)

    # Bandit: commands originate from vetted check configurations; we pass
    # argument lists directly without shell expansion.
    completed: CompletedProcess[str] = subprocess.run(  # nosec B603 - controlled arguments, not user supplied
        normalized,
        cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
        env=dict(resolved_options.env) if resolved_options.env is not None else None,
        check=False,
        capture_output=resolved_options.capture_output,
        encoding=_OUTPUT_ENCODING,
        errors=_DECODE_ERRORS,
        stdin=subprocess.DEVNULL if resolved_options.discard_stdin else None,
    )
    return completed


__all__ = [
    "CommandOptions",
    "StreamMirror",
    "run_command",
]
