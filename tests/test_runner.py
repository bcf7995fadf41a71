# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the run-level check pipeline."""

from __future__ import annotations

from pathlib import Path

import pytest

from pyverify.config import CheckSpec, CommandSpec, RunConfig, TargetLister
from pyverify.errors import IncompleteCheckError, InstallError, ProcessExecutionError, UnknownMacroError
from pyverify.orchestration.runner import prepare_check, run_checks
from pyverify.validators import CoverageValidator, PlainOutputValidator


def _present(_cmd: str) -> str:
    return "/usr/bin/tool"


def _config(tmp_path: Path, *checks: CheckSpec, **kwargs) -> RunConfig:
    return RunConfig(checks=checks, root=tmp_path, simultaneous_runs=2, **kwargs)


def test_prepare_check_merges_macro_and_global_coverage_ignores(tmp_path: Path) -> None:
    macro = CheckSpec(
        name="code coverage",
        cmd="go",
        check=CommandSpec(args=("test", "-cover", "./...")),
        validator_config={"type": "cover", "coverage": 100},
    )
    config = _config(tmp_path, macros={"go-cover": macro}, ignore_dir=("vendor",))
    check = CheckSpec(macro="go-cover", validator_config={"coverage": 80, "ignoreDir": ["gen"]})

    prepared = prepare_check(check, config, fix=False)

    assert prepared.name == "code coverage"
    assert prepared.validator == CoverageValidator(required=80.0, ignore_dir=("gen", "vendor"))


def test_prepare_check_requires_check_command(tmp_path: Path) -> None:
    check = CheckSpec(name="fixer", cmd="gofmt", fix=CommandSpec(args=("-w", "$1")))

    with pytest.raises(IncompleteCheckError):
        prepare_check(check, _config(tmp_path), fix=False)
    prepared = prepare_check(check, _config(tmp_path), fix=True)
    assert prepared.validator == PlainOutputValidator()


def test_checks_run_in_order_and_stop_at_first_failure(tmp_path, make_environment, fake_runner) -> None:
    fake_runner.on("first")
    fake_runner.on("second", returncode=1, stdout="broken\n")
    config = _config(
        tmp_path,
        CheckSpec(name="one", cmd="first", check=CommandSpec()),
        CheckSpec(name="two", cmd="second", check=CommandSpec()),
        CheckSpec(name="three", cmd="third", check=CommandSpec()),
    )

    report = run_checks(make_environment(config=config), which=_present)

    assert [cmd[0] for cmd in fake_runner.commands()] == ["first", "second"]
    assert report.failed_check == "two"
    assert isinstance(report.error, ProcessExecutionError)
    assert report.exit_code == 1
    assert [check_report.check_name for check_report in report.reports] == ["one", "two"]


def test_all_checks_passing(tmp_path, make_environment, fake_runner) -> None:
    fake_runner.on("git", stdout="a.go\nb.go\n")
    config = _config(
        tmp_path,
        CheckSpec(name="fmt", cmd="gofmt", check=CommandSpec(args=("-l", "$1")), each=TargetLister(cmd="git")),
        CheckSpec(name="vet", cmd="go", check=CommandSpec(args=("vet", "./..."))),
    )

    report = run_checks(make_environment(config=config), which=_present)

    assert report.ok
    assert report.exit_code == 0
    assert [check_report.results for check_report in report.reports] == [2, 1]


def test_unknown_macro_aborts_run(tmp_path, make_environment, fake_runner) -> None:
    config = _config(
        tmp_path,
        CheckSpec(name="ghost", macro="missing"),
        CheckSpec(name="never", cmd="never", check=CommandSpec()),
    )

    report = run_checks(make_environment(config=config), which=_present)

    assert isinstance(report.error, UnknownMacroError)
    assert report.failed_check == "ghost"
    assert fake_runner.calls == []


def test_install_failure_aborts_check(tmp_path, make_environment, fake_runner) -> None:
    fake_runner.on("go", returncode=1)
    config = _config(
        tmp_path,
        CheckSpec(name="lint", cmd="golint", check=CommandSpec(), install=CommandSpec(cmd="go", args=("get", "x"))),
    )

    report = run_checks(make_environment(config=config), which=lambda _cmd: None)

    assert isinstance(report.error, InstallError)
    assert fake_runner.commands("golint") == []


def test_end_to_end_failing_lister_targets(tmp_path, make_environment, fake_runner) -> None:
    fake_runner.on("git", stdout="a.go\nb.go\n")
    fake_runner.on("false", returncode=1)
    config = _config(
        tmp_path,
        CheckSpec(name="always fails", cmd="false", check=CommandSpec(args=("$1",)), each=TargetLister(cmd="git")),
    )

    report = run_checks(make_environment(config=config), which=_present)

    (check_report,) = report.reports
    assert check_report.results == 2
    assert check_report.failures == 2
    assert report.exit_code == 1
    assert sorted(cmd[-1] for cmd in fake_runner.commands("false")) == ["a.go", "b.go"]


def test_prepare_check_looks_up_macro_once(monkeypatch, tmp_path: Path) -> None:
    import pyverify.macros as macros_module
    import pyverify.orchestration.runner as runner_module

    lookups: list[str] = []
    original = macros_module.lookup_macro

    def counting_lookup(check, macros):
        lookups.append(check.macro)
        return original(check, macros)

    monkeypatch.setattr(runner_module, "lookup_macro", counting_lookup)
    monkeypatch.setattr(macros_module, "lookup_macro", counting_lookup)
    macro = CheckSpec(name="fmt", cmd="gofmt", check=CommandSpec(args=("-l", "$1")))
    config = _config(tmp_path, macros={"gofmt": macro})

    prepared = prepare_check(CheckSpec(macro="gofmt"), config, fix=False)

    assert prepared.spec.cmd == "gofmt"
    assert lookups == ["gofmt"]
