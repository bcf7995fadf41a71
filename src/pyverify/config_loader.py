# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Load the JSON configuration document and merge the built-in macro catalog."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from .catalog import BUILTIN_CATALOG
from .config import RunConfig
from .errors import ConfigLoadError
from .validators import decode_validator_spec

DEFAULT_CONFIG_FILENAME: Final[str] = "pyverify.json"


def _read_document(path: Path) -> Mapping[str, Any]:
    """Return the decoded JSON object stored at ``path``.

    Raises:
        ConfigLoadError: If the file is unreadable, not JSON, or not an object.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"unable to read configuration {path}: {exc}") from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigLoadError(f"invalid JSON in {path}: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise ConfigLoadError(f"configuration {path} must contain a JSON object")
    return payload


def _validate(document: Mapping[str, Any], *, source: str) -> RunConfig:
    try:
        return RunConfig.model_validate(document)
    except ValidationError as exc:
        raise ConfigLoadError(f"invalid configuration in {source}: {exc}") from exc


def merge_catalog(user: RunConfig, catalog: RunConfig, *, root: Path, simultaneous_runs: int | None = None) -> RunConfig:
    """Combine a user configuration with the built-in catalog.

    Catalog checks run before user checks and catalog macros take the place
    of user macros with the same name.

    Args:
        user: Configuration parsed from the user's document.
        catalog: Configuration parsed from :data:`BUILTIN_CATALOG`.
        root: Directory holding the user's configuration file.
        simultaneous_runs: Optional override of the document's concurrency limit.

    Returns:
        RunConfig: Merged configuration.

    Raises:
        ConfigLoadError: If a macro's validator cannot be decoded or the
            concurrency override is invalid.
    """

    macros = {**user.macros, **catalog.macros}
    for name, macro in macros.items():
        try:
            decode_validator_spec(macro.validator_config)
        except ConfigLoadError as exc:
            raise ConfigLoadError(f"macro {name}: {exc}") from exc
    try:
        return RunConfig(
            checks=(*catalog.checks, *user.checks),
            macros=macros,
            ignore_dir=user.ignore_dir,
            simultaneous_runs=user.simultaneous_runs if simultaneous_runs is None else simultaneous_runs,
            root=root,
        )
    except ValidationError as exc:
        raise ConfigLoadError(f"invalid run settings: {exc}") from exc


def load_config(
    path: Path,
    *,
    simultaneous_runs: int | None = None,
    catalog: Mapping[str, Any] = BUILTIN_CATALOG,
) -> RunConfig:
    """Load ``path`` and return the run configuration.

    Args:
        path: Location of the JSON configuration document.
        simultaneous_runs: Optional override for ``simultaneousRuns``; ``0``
            selects the CPU-derived default.
        catalog: Built-in catalog merged ahead of the document.

    Returns:
        RunConfig: Configuration rooted at the document's directory.

    Raises:
        ConfigLoadError: If the document or catalog cannot be loaded.
    """

    resolved = path.resolve()
    user = _validate(_read_document(resolved), source=str(resolved))
    builtin = _validate(catalog, source="built-in catalog")
    return merge_catalog(user, builtin, root=resolved.parent, simultaneous_runs=simultaneous_runs)


__all__ = ["DEFAULT_CONFIG_FILENAME", "load_config", "merge_catalog"]
