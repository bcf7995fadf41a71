# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the subprocess wrappers."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from pyverify.core.runtime.process import CommandOptions, run_command
from pyverify.errors import ProcessExecutionError
from pyverify.process_utils import find_executable, run_checked

_SCRIPT = "import sys; print('out line'); print('err line', file=sys.stderr); sys.exit({code})"


def test_run_command_captures_streams_separately(tmp_path: Path) -> None:
    completed = run_command([sys.executable, "-c", _SCRIPT.format(code=0)], options=CommandOptions(cwd=tmp_path))

    assert completed.returncode == 0
    assert completed.stdout == "out line\n"
    assert completed.stderr == "err line\n"


def test_run_command_mirrors_streams_while_capturing(tmp_path: Path) -> None:
    mirrored_out: list[str] = []
    mirrored_err: list[str] = []
    options = CommandOptions(cwd=tmp_path, stdout_mirror=mirrored_out.append, stderr_mirror=mirrored_err.append)

    completed = run_command([sys.executable, "-c", _SCRIPT.format(code=3)], options=options)

    assert completed.returncode == 3
    assert completed.stdout == "out line\n"
    assert completed.stderr == "err line\n"
    assert mirrored_out == ["out line\n"]
    assert mirrored_err == ["err line\n"]


def test_run_command_uses_working_directory(tmp_path: Path) -> None:
    completed = run_command(
        [sys.executable, "-c", "import os; print(os.getcwd())"],
        options=CommandOptions(cwd=tmp_path),
    )

    assert Path(completed.stdout.strip()).resolve() == tmp_path.resolve()


def test_run_command_unknown_executable() -> None:
    with pytest.raises(FileNotFoundError):
        run_command(["definitely-not-a-real-tool-pyverify"])


def test_run_checked_wraps_failures() -> None:
    with pytest.raises(ProcessExecutionError) as excinfo:
        run_checked([sys.executable, "-c", _SCRIPT.format(code=2)], runner=run_command)

    assert excinfo.value.returncode == 2
    assert excinfo.value.output == "out line\nerr line\n"

    with pytest.raises(ProcessExecutionError) as missing:
        run_checked(["definitely-not-a-real-tool-pyverify"], runner=run_command)
    assert missing.value.returncode is None


def test_find_executable() -> None:
    assert find_executable("") is None
    assert find_executable("definitely-not-a-real-tool-pyverify") is None


def test_mirrored_run_survives_undecodable_output(tmp_path: Path) -> None:
    script = "import sys; sys.stdout.buffer.write(b'bad \\xff byte\\n' + b'x' * 200000 + b'\\n')"
    mirrored: list[str] = []

    completed = run_command(
        [sys.executable, "-c", script],
        options=CommandOptions(cwd=tmp_path, stdout_mirror=mirrored.append, stderr_mirror=mirrored.append),
    )

    assert completed.returncode == 0
    assert completed.stdout.startswith("bad \ufffd byte\n")
    assert len(completed.stdout) == len("bad \ufffd byte\n") + 200001
    assert "".join(mirrored) == completed.stdout


def test_mirrored_run_drains_after_mirror_error(tmp_path: Path) -> None:
    script = "import sys; sys.stdout.write('line\\n' * 50000)"

    def broken(_chunk: str) -> None:
        raise RuntimeError("console closed")

    with pytest.raises(RuntimeError, match="console closed"):
        run_command([sys.executable, "-c", script], options=CommandOptions(cwd=tmp_path, stdout_mirror=broken))


def test_run_checked_keeps_undecodable_output_of_successful_process() -> None:
    script = "import sys; sys.stdout.buffer.write(b'caf\\xe9.go\\n')"

    completed = run_checked([sys.executable, "-c", script], runner=run_command)

    assert completed.returncode == 0
    assert completed.stdout == "caf\ufffd.go\n"


def test_run_checked_only_wraps_launch_failures() -> None:
    def decoding_runner(cmd, *, options=None):
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    with pytest.raises(UnicodeDecodeError):
        run_checked(["tool"], runner=decoding_runner)

    with pytest.raises(ProcessExecutionError, match="empty command"):
        run_checked([], runner=run_command)
