# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Output validators deciding whether a completed invocation succeeded.

Validator configuration arrives as an opaque mapping (the ``validate`` key of a
check). It is decoded in two steps: the ``type`` tag selects one of the closed
set of variants, then the remaining keys are validated against that variant's
payload model. Unknown or missing tags fall back to the plain output policy.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Final, Literal, Protocol, TypeAlias, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import (
    ConfigLoadError,
    CoverageBelowThresholdError,
    NonEmptyStderrError,
    UnexpectedOutputError,
    UnparsableCoverageLineError,
)
from .paths import contains_fragment, merge_fragments

TYPE_KEY: Final[str] = "type"
COVER_TAG: Final[str] = "cover"
RETURNCODE_TAG: Final[str] = "returncode"
NO_TEST_FILES_MARKER: Final[str] = "[no test files]"
COVERAGE_EPSILON: Final[float] = 0.009
_COVERAGE_PATTERN: Final[re.Pattern[str]] = re.compile(r"coverage: ([0-9.]+)% of statements")

ValidatorConfig: TypeAlias = Mapping[str, Any]


class PlainOutputSpec(BaseModel):
    """Accept output only when stderr is empty and stdout lines are all ignorable."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    kind: Literal["plain"] = "plain"
    ignore_msg: tuple[str, ...] = Field(default_factory=tuple, alias="ignoreMsg")


class ReturnCodeSpec(BaseModel):
    """Accept any invocation whose process exited successfully."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    kind: Literal["returncode"] = "returncode"


class CoverageSpec(BaseModel):
    """Require every reported package to meet a coverage percentage."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    kind: Literal["cover"] = "cover"
    coverage: float = 0.0
    ignore_dir: tuple[str, ...] = Field(default_factory=tuple, alias="ignoreDir")


ValidatorSpec: TypeAlias = PlainOutputSpec | ReturnCodeSpec | CoverageSpec


@runtime_checkable
class Validator(Protocol):
    """Judge of captured invocation output."""

    def check(self, stdout: str, stderr: str) -> None:
        """Raise an :class:`~pyverify.errors.OutputError` when output is unacceptable.

        Args:
            stdout: Captured standard output of the invocation.
            stderr: Captured standard error of the invocation.
        """

        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class PlainOutputValidator:
    """Default policy: silence is success, unless a line matches an ignore message."""

    ignore_msg: tuple[str, ...] = ()

    def check(self, stdout: str, stderr: str) -> None:
        if stderr:
            raise NonEmptyStderrError()
        for line in stdout.split("\n"):
            if line == "":
                continue
            if any(message in line for message in self.ignore_msg):
                continue
            raise UnexpectedOutputError(line)


@dataclass(frozen=True, slots=True)
class ReturnCodeValidator:
    """Policy that never inspects output."""

    def check(self, stdout: str, stderr: str) -> None:
        del stdout, stderr


@dataclass(frozen=True, slots=True)
class CoverageValidator:
    """Parse ``go test -cover`` style output and enforce a minimum percentage."""

    required: float = 0.0
    ignore_dir: tuple[str, ...] = field(default_factory=tuple)

    def with_ignored(self, fragments: Iterable[str]) -> CoverageValidator:
        """Return a copy that also skips packages under ``fragments``."""

        return CoverageValidator(required=self.required, ignore_dir=merge_fragments(self.ignore_dir, fragments))

    def check(self, stdout: str, stderr: str) -> None:
        """Validate each non-empty stdout line against the coverage threshold.

        Raises:
            UnparsableCoverageLineError: If a line reports no percentage.
            CoverageBelowThresholdError: If a retained line is below the threshold.
        """

        del stderr
        for line in stdout.split("\n"):
            if line == "":
                continue
            seen = self._parse_percentage(line)
            parts = line.split("\t")
            if len(parts) > 1 and contains_fragment(parts[1], self.ignore_dir):
                continue
            if seen + COVERAGE_EPSILON < self.required:
                raise CoverageBelowThresholdError(seen=seen, required=self.required)

    @staticmethod
    def _parse_percentage(line: str) -> float:
        if NO_TEST_FILES_MARKER in line:
            return 0.0
        match = _COVERAGE_PATTERN.search(line)
        if match is None:
            raise UnparsableCoverageLineError(line)
        try:
            return float(match.group(1))
        except ValueError as exc:
            raise UnparsableCoverageLineError(line) from exc


def decode_validator_spec(config: ValidatorConfig | None) -> ValidatorSpec:
    """Decode an opaque validator mapping into its tagged variant.

    Args:
        config: Raw ``validate`` mapping from a check, or ``None``.

    Returns:
        ValidatorSpec: Variant selected by the ``type`` tag.

    Raises:
        ConfigLoadError: If the payload does not fit the selected variant.
    """

    if not config:
        return PlainOutputSpec()
    payload = {key: value for key, value in config.items() if key != TYPE_KEY}
    tag = config.get(TYPE_KEY)
    try:
        if tag == COVER_TAG:
            return CoverageSpec.model_validate(payload)
        if tag == RETURNCODE_TAG or (tag is None and payload.get("ignoreOutput") is True):
            return ReturnCodeSpec.model_validate(payload)
        return PlainOutputSpec.model_validate(payload)
    except ValidationError as exc:
        raise ConfigLoadError(f"invalid validator configuration {dict(config)!r}: {exc}") from exc


def build_validator(spec: ValidatorSpec) -> Validator:
    """Return the runtime validator for a decoded ``spec``."""

    if isinstance(spec, CoverageSpec):
        return CoverageValidator(required=spec.coverage, ignore_dir=spec.ignore_dir)
    if isinstance(spec, ReturnCodeSpec):
        return ReturnCodeValidator()
    return PlainOutputValidator(ignore_msg=spec.ignore_msg)


def declares_validator_type(config: ValidatorConfig | None) -> bool:
    """Return ``True`` when ``config`` names its own validator variant."""

    return bool(config) and config.get(TYPE_KEY) is not None


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def layer_validator_config(
    base: ValidatorConfig | None,
    overlay: ValidatorConfig | None,
) -> dict[str, Any]:
    """Layer a partial validator mapping over a base mapping.

    Keys of ``overlay`` carrying a non-empty value replace the base value;
    empty values (``0``, ``""``, ``[]``, ``None``) leave the base untouched.
    The base's ``type`` tag always survives.

    Args:
        base: Validator mapping inherited from a macro.
        overlay: Partial mapping declared by the check itself.

    Returns:
        dict[str, Any]: Combined mapping ready for :func:`decode_validator_spec`.
    """

    layered: dict[str, Any] = dict(base or {})
    for key, value in (overlay or {}).items():
        if key == TYPE_KEY or _is_empty(value):
            continue
        layered[key] = value
    return layered


__all__ = [
    "COVERAGE_EPSILON",
    "NO_TEST_FILES_MARKER",
    "CoverageSpec",
    "CoverageValidator",
    "PlainOutputSpec",
    "PlainOutputValidator",
    "ReturnCodeSpec",
    "ReturnCodeValidator",
    "Validator",
    "ValidatorSpec",
    "build_validator",
    "declares_validator_type",
    "decode_validator_spec",
    "layer_validator_config",
]
