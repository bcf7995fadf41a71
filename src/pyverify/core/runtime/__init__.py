# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Runtime helpers for launching external processes."""

from .process import CommandOptions, StreamMirror, run_command

__all__ = [
    "CommandOptions",
    "StreamMirror",
    "run_command",
]
