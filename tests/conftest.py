# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from subprocess import CompletedProcess

import pytest

from pyverify.config import RunConfig, RunOptions
from pyverify.core.runtime.process import CommandOptions
from pyverify.logging import RunLogger
from pyverify.orchestration.engine import ExecutionEnvironment

Handler = Callable[[tuple[str, ...], CommandOptions | None], CompletedProcess[str]]


def completed(
    cmd: Sequence[str],
    *,
    stdout: str = "",
    stderr: str = "",
    returncode: int = 0,
) -> CompletedProcess[str]:
    return CompletedProcess(args=list(cmd), returncode=returncode, stdout=stdout, stderr=stderr)


class FakeRunner:
    """Thread-safe command runner returning canned results keyed by executable."""

    def __init__(self) -> None:
        self.calls: list[tuple[tuple[str, ...], CommandOptions | None]] = []
        self._handlers: dict[str, Handler] = {}
        self._lock = threading.Lock()

    def on(
        self,
        executable: str,
        *,
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
        handler: Handler | None = None,
    ) -> None:
        if handler is None:

            def handler(cmd: tuple[str, ...], options: CommandOptions | None) -> CompletedProcess[str]:
                del options
                return completed(cmd, stdout=stdout, stderr=stderr, returncode=returncode)

        self._handlers[executable] = handler

    def commands(self, executable: str | None = None) -> list[tuple[str, ...]]:
        with self._lock:
            return [cmd for cmd, _ in self.calls if executable is None or cmd[0] == executable]

    def __call__(self, cmd: Sequence[str], *, options: CommandOptions | None = None) -> CompletedProcess[str]:
        command = tuple(cmd)
        with self._lock:
            self.calls.append((command, options))
        handler = self._handlers.get(command[0])
        if handler is None:
            return completed(command)
        return handler(command, options)


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Return a fresh :class:`FakeRunner`."""
    return FakeRunner()


@pytest.fixture
def make_environment(tmp_path: Path, fake_runner: FakeRunner) -> Callable[..., ExecutionEnvironment]:
    """Return a factory building execution environments rooted at ``tmp_path``."""

    def factory(
        *,
        fix: bool = False,
        verbose: bool = False,
        simultaneous_runs: int = 2,
        ignore_dir: tuple[str, ...] = (),
        config: RunConfig | None = None,
    ) -> ExecutionEnvironment:
        run_config = config or RunConfig(
            simultaneous_runs=simultaneous_runs,
            ignore_dir=ignore_dir,
            root=tmp_path,
        )
        return ExecutionEnvironment(
            config=run_config,
            options=RunOptions(fix=fix, verbose=verbose, emoji=False),
            runner=fake_runner,
            logger=RunLogger(use_emoji=False, debug_enabled=verbose),
        )

    return factory
