# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point."""

from __future__ import annotations

import typer

from .run import run_command

app = typer.Typer(
    help="Configuration-driven concurrent check runner.",
    add_completion=False,
    no_args_is_help=False,
)
app.command(name="run")(run_command)


def main() -> None:
    """Console script entry point."""

    app()


__all__ = ["app", "main"]
