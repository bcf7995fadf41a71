# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Built-in macros available to every configuration document.

The catalog uses the same shape as a user configuration file so it can be
validated by the same models and merged ahead of user-defined entries.
"""

from __future__ import annotations

from typing import Any, Final

_GO_FILES_LISTER: Final[dict[str, Any]] = {
    "cmd": "git",
    "args": ["ls-files", "--", "*.go"],
}

BUILTIN_CATALOG: Final[dict[str, Any]] = {
    "checks": [],
    "macros": {
        "goimport": {
            "name": "import fix",
            "cmd": "goimports",
            "fix": {"args": ["-w", "-l", "$1"]},
            "check": {"args": ["-l", "$1"]},
            "install": {"cmd": "go", "args": ["get", "golang.org/x/tools/cmd/goimports"]},
            "each": _GO_FILES_LISTER,
        },
        "gofmt": {
            "name": "fmt fix",
            "cmd": "gofmt",
            "fix": {"args": ["-s", "-w", "-l", "$1"]},
            "check": {"args": ["-s", "-l", "$1"]},
            "each": _GO_FILES_LISTER,
        },
        "vet": {
            "name": "vet",
            "cmd": "go",
            "check": {"args": ["tool", "vet", "$1"]},
            "gotool": "vet",
            "install": {"cmd": "go", "args": ["get", "golang.org/x/tools/cmd/vet"]},
            "each": _GO_FILES_LISTER,
        },
        "golint": {
            "name": "code lint",
            "cmd": "golint",
            "check": {"args": ["-min_confidence=.3", "$1"]},
            "install": {"cmd": "go", "args": ["get", "github.com/golang/lint/golint"]},
            "each": _GO_FILES_LISTER,
        },
        "gocyclo": {
            "name": "cyclomatic check",
            "cmd": "gocyclo",
            "check": {"args": ["-over", "10", "$1"]},
            "install": {"cmd": "go", "args": ["get", "github.com/fzipp/gocyclo"]},
            "each": _GO_FILES_LISTER,
        },
        "go-install": {
            "name": "Check that installs",
            "cmd": "go",
            "godep": True,
            "check": {"args": ["install", "."]},
        },
        "go-cover": {
            "name": "code coverage",
            "cmd": "go",
            "godep": True,
            "gotool": "cover",
            "install": {"cmd": "go", "args": ["get", "golang.org/x/tools/cmd/cover"]},
            "check": {
                "args": [
                    "test",
                    "-cover",
                    "-covermode",
                    "atomic",
                    "-race",
                    "-parallel=8",
                    "-timeout",
                    "3s",
                    "-cpu",
                    "4",
                    "./...",
                ]
            },
            "validate": {"type": "cover", "coverage": 100},
        },
        "gocoverdir": {
            "name": "code coverage with profile output",
            "cmd": "gocoverdir",
            "install": {"cmd": "go", "args": ["get", "github.com/cep21/gocoverdir"]},
            "check": {"args": ["-race", "-timeout", "3s", "-cpu", "4", "-requiredcoverage", "100", "./..."]},
        },
    },
}

__all__ = ["BUILTIN_CATALOG"]
