# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text

from .runtime.console.manager import detect_tty, get_console_manager


def emoji(symbol: str, enable: bool) -> str:
    """Select an emoji symbol based on the caller's preference.

    Args:
        symbol: Emoji text to include in the output.
        enable: Flag indicating whether emoji output is desired.

    Returns:
        str: Emoji symbol when enabled, otherwise an empty string.
    """

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
    stderr: bool = False,
) -> None:
    """Render ``msg`` to the console using shared styling helpers.

    Args:
        msg: Message text to print to the console.
        style: Rich style name to apply when colour output is active.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
        stderr: Route the message to standard error instead of standard output.
    """

    color_enabled = detect_tty("stderr" if stderr else "stdout") if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji, stderr=stderr)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    prefix = emoji("ℹ️ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    prefix = emoji("✅ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    prefix = emoji("⚠️ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    prefix = emoji("❌ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


def echo(msg: str) -> None:
    """Write ``msg`` to stdout verbatim, without styling or markup parsing."""

    _print_line(msg, style=None, use_emoji=False, use_color=False)


@dataclass(slots=True)
class RunLogger:
    """Adapter around the logging helpers honouring run-level presentation flags."""

    use_emoji: bool = True
    debug_enabled: bool = False

    def info(self, message: str) -> None:
        """Log an informational message."""

        info(message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        """Log a success message."""

        ok(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        """Log a warning message."""

        warn(message, use_emoji=self.use_emoji)

    def fail(self, message: str) -> None:
        """Log a failure message."""

        fail(message, use_emoji=self.use_emoji)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout unchanged."""

        echo(message)

    def debug(self, message: str) -> None:
        """Emit a diagnostic message on stderr when verbose output is enabled.

        Args:
            message: Debug payload rendered with a dim ``[debug]`` prefix.
        """

        if not self.debug_enabled:
            return
        text = Text("[debug] ", style="bold cyan")
        text.append(message, style="dim")
        get_console_manager().get(color=detect_tty("stderr"), emoji=False, stderr=True).print(text)

    def mirror_stdout(self, chunk: str) -> None:
        """Echo a chunk of child stdout to the operator's console."""

        get_console_manager().get(color=False, emoji=False).out(chunk, end="", highlight=False)

    def mirror_stderr(self, chunk: str) -> None:
        """Echo a chunk of child stderr to the operator's console."""

        get_console_manager().get(color=False, emoji=False, stderr=True).out(chunk, end="", highlight=False)


__all__ = [
    "RunLogger",
    "echo",
    "emoji",
    "fail",
    "info",
    "ok",
    "warn",
]
