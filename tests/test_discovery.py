# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for target enumeration and directory fragment filtering."""

from __future__ import annotations

from pathlib import Path

import pytest

from pyverify.config import CheckSpec, CommandSpec, TargetLister
from pyverify.discovery import IMPLICIT_TARGET, enumerate_targets, list_targets
from pyverify.errors import ListerExecutionError
from pyverify.paths import contains_fragment, iter_segments_leaf_first, merge_fragments


def test_lister_filters_empty_and_ignored_segments() -> None:
    lister = TargetLister(ignore_dir=("abcd",))

    assert lister.is_filtered("")
    assert lister.is_filtered("testing/abcd/test.go")
    assert not lister.is_filtered("testing/abcde/test.go")


def test_segments_walk_leaf_to_root() -> None:
    assert list(iter_segments_leaf_first("a/b/c.go")) == ["c.go", "b", "a"]
    assert list(iter_segments_leaf_first("/abs/x")) == ["x", "abs"]
    assert list(iter_segments_leaf_first("")) == []


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("vendor/x.go", True),
        ("pkg/vendor", True),
        ("pkg/vendors/x.go", False),
        ("./pkg/x.go", False),
    ],
)
def test_contains_fragment_is_segment_exact(path: str, expected: bool) -> None:
    assert contains_fragment(path, {"vendor"}) is expected


def test_enumerate_without_lister_yields_implicit_target(tmp_path: Path, fake_runner) -> None:
    check = CheckSpec(name="install", cmd="go", check=CommandSpec(args=("install", ".")))

    targets = enumerate_targets(check, root=tmp_path, global_ignore=("vendor",), runner=fake_runner)

    assert targets == [IMPLICIT_TARGET]
    assert fake_runner.calls == []


def test_enumerate_runs_lister_in_root_and_unions_ignores(tmp_path: Path, fake_runner) -> None:
    fake_runner.on("git", stdout="a.go\nvendor/b.go\ngen/c.go\nd/e.go\n")
    check = CheckSpec(
        name="fmt",
        cmd="gofmt",
        each=TargetLister(cmd="git", args=("ls-files", "--", "*.go"), ignore_dir=("gen",)),
    )

    targets = enumerate_targets(check, root=tmp_path, global_ignore=("vendor",), runner=fake_runner)

    assert targets == ["a.go", "d/e.go"]
    ((command, options),) = fake_runner.calls
    assert command == ("git", "ls-files", "--", "*.go")
    assert options is not None and options.cwd == tmp_path


def test_list_targets_failure_carries_output(tmp_path: Path, fake_runner) -> None:
    fake_runner.on("git", stdout="partial\n", stderr="fatal: not a git repository\n", returncode=128)

    with pytest.raises(ListerExecutionError) as excinfo:
        list_targets(TargetLister(cmd="git", args=("ls-files",)), root=tmp_path, runner=fake_runner)

    assert "fatal: not a git repository" in excinfo.value.output
    assert excinfo.value.cause.returncode == 128


def test_list_targets_missing_executable(tmp_path: Path) -> None:
    def missing(cmd, *, options=None):
        raise FileNotFoundError(f"Executable '{cmd[0]}' was not found on PATH")

    with pytest.raises(ListerExecutionError) as excinfo:
        list_targets(TargetLister(cmd="nope"), root=tmp_path, runner=missing)

    assert excinfo.value.cause.returncode is None


def test_list_targets_strips_crlf_line_endings(tmp_path: Path, fake_runner) -> None:
    fake_runner.on("git", stdout="a.go\r\nvendor/b.go\r\n\r\nd/e.go\r\n")

    targets = list_targets(
        TargetLister(cmd="git", args=("ls-files",), ignore_dir=("vendor",)),
        root=tmp_path,
        runner=fake_runner,
    )

    assert targets == ["a.go", "d/e.go"]


def test_merge_fragments_keeps_first_occurrence_order() -> None:
    assert merge_fragments(("gen", "vendor"), ("vendor", "third_party")) == ("gen", "vendor", "third_party")
    assert TargetLister(ignore_dir=("gen",)).with_ignored(("gen", "vendor")).ignore_dir == ("gen", "vendor")
