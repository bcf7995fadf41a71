# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Macro resolution: fill a check's unset fields from a reusable template.

Every merge in this module follows one rule, "non-empty wins": the check's own
value is kept whenever it is non-empty, otherwise the macro's value is used.
Sub-command specs and target listers merge field by field with the same rule
instead of being replaced wholesale. Merges are pure; the parsed check is
never mutated.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TypeVar

from .config import CheckSpec, CommandSpec, TargetLister
from .errors import UnknownMacroError
from .logging import RunLogger
from .validators import (
    Validator,
    build_validator,
    declares_validator_type,
    decode_validator_spec,
    layer_validator_config,
)

_SeqT = TypeVar("_SeqT", bound=Sequence[str])


def non_empty_str(own: str, inherited: str) -> str:
    """Return ``own`` unless it is empty."""
    return own if own else inherited


def non_empty_seq(own: _SeqT, inherited: _SeqT) -> _SeqT:
    """Return ``own`` unless it has no items."""
    return own if len(own) > 0 else inherited


def merge_command(own: CommandSpec | None, inherited: CommandSpec | None) -> CommandSpec | None:
    """Merge two sub-command specs field by field."""
    if own is None:
        return inherited
    if inherited is None:
        return own
    return CommandSpec(
        cmd=non_empty_str(own.cmd, inherited.cmd),
        args=non_empty_seq(own.args, inherited.args),
    )


def merge_lister(own: TargetLister | None, inherited: TargetLister | None) -> TargetLister | None:
    """Merge two target listers field by field."""
    if own is None:
        return inherited
    if inherited is None:
        return own
    return TargetLister(
        cmd=non_empty_str(own.cmd, inherited.cmd),
        args=non_empty_seq(own.args, inherited.args),
        ignore_dir=non_empty_seq(own.ignore_dir, inherited.ignore_dir),
    )


def merge_check(own: CheckSpec, template: CheckSpec) -> CheckSpec:
    """Return ``own`` with every unset field filled from ``template``.

    Args:
        own: Check as declared in the configuration document.
        template: Macro definition referenced by the check.

    Returns:
        CheckSpec: Effective check. ``macro`` and the raw validator mapping
        stay those of ``own``; validator inheritance is handled by
        :func:`resolve_validator`.
    """

    return own.model_copy(
        update={
            "name": non_empty_str(own.name, template.name),
            "cmd": non_empty_str(own.cmd, template.cmd),
            "fix": merge_command(own.fix, template.fix),
            "check": merge_command(own.check, template.check),
            "install": merge_command(own.install, template.install),
            "gotool": non_empty_str(own.gotool, template.gotool),
            "godep": own.godep if own.godep is not None else template.godep,
            "each": merge_lister(own.each, template.each),
        }
    )


def lookup_macro(check: CheckSpec, macros: Mapping[str, CheckSpec]) -> CheckSpec | None:
    """Return the macro referenced by ``check``, if any.

    Raises:
        UnknownMacroError: If the check names a macro missing from ``macros``.
    """

    if not check.macro:
        return None
    try:
        return macros[check.macro]
    except KeyError as exc:
        raise UnknownMacroError(check.macro) from exc


def apply_macro(
    check: CheckSpec,
    template: CheckSpec | None,
    *,
    logger: RunLogger | None = None,
) -> CheckSpec:
    """Merge an already looked-up ``template`` into ``check``.

    Returns:
        CheckSpec: ``check`` unchanged when ``template`` is ``None``.
    """

    if template is None:
        return check
    if logger is not None:
        logger.debug(f"Loading properties for macro {check.macro}")
    return merge_check(check, template)


def resolve_check(
    check: CheckSpec,
    macros: Mapping[str, CheckSpec],
    *,
    logger: RunLogger | None = None,
) -> CheckSpec:
    """Apply the macro referenced by ``check`` and return the effective check.

    Args:
        check: Check as parsed from configuration.
        macros: Macro mapping, built-in catalog included.
        logger: Optional logger receiving a debug note per macro load.

    Returns:
        CheckSpec: The check itself when it references no macro, otherwise the
        merged check.

    Raises:
        UnknownMacroError: If the referenced macro does not exist.
    """

    return apply_macro(check, lookup_macro(check, macros), logger=logger)


def resolve_validator(check: CheckSpec, template: CheckSpec | None) -> Validator:
    """Decode the validator attached to ``check``.

    A check that names its own validator ``type`` keeps it. Otherwise the
    macro's validator is the base and the check's partial configuration, such
    as an overridden ``coverage`` threshold, is layered on top.

    Args:
        check: Check whose ``validate`` mapping should be decoded.
        template: Macro the check inherits from, if any.

    Returns:
        Validator: Runtime validator for the check.
    """

    own_config = check.validator_config
    if template is None or declares_validator_type(own_config):
        return build_validator(decode_validator_spec(own_config))
    layered = layer_validator_config(template.validator_config, own_config)
    return build_validator(decode_validator_spec(layered))


__all__ = [
    "apply_macro",
    "lookup_macro",
    "merge_check",
    "merge_command",
    "merge_lister",
    "non_empty_seq",
    "non_empty_str",
    "resolve_check",
    "resolve_validator",
]
