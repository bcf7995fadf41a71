# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich consoles shared by the run logger and the output mirrors."""

from __future__ import annotations

import sys
import threading
from functools import lru_cache
from typing import Literal, TextIO

from rich.console import Console

Stream = Literal["stdout", "stderr"]


def _stream_file(stream: Stream) -> TextIO:
    return sys.stderr if stream == "stderr" else sys.stdout


def detect_tty(stream: Stream = "stdout") -> bool:
    """Return ``True`` when ``stream`` appears to be backed by a terminal.

    Args:
        stream: Which standard stream to inspect.

    Returns:
        bool: ``True`` when the stream reports TTY support, ``False`` otherwise.
    """

    try:
        return _stream_file(stream).isatty()
    except (AttributeError, ValueError):
        return False


class RichConsoleManager:
    """Hand out Rich consoles keyed by stream and presentation flags.

    Worker pump threads request consoles concurrently while mirroring child
    output, so cache population is serialised.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cache: dict[tuple[Stream, bool, bool, bool], Console] = {}

    def get(self, *, color: bool, emoji: bool, stderr: bool = False) -> Console:
        """Return a console writing to stdout, or stderr when ``stderr`` is set.

        Args:
            color: ``True`` when ANSI colour output should be enabled.
            emoji: ``True`` when Rich should render emoji glyphs.
            stderr: ``True`` when the console should write to standard error.

        Returns:
            Console: Cached or newly constructed console matching the preferences.
        """

        stream: Stream = "stderr" if stderr else "stdout"
        tty = detect_tty(stream)
        key = (stream, color, emoji, tty)
        with self._lock:
            console = self._cache.get(key)
            if console is None:
                colored = color and tty
                console = Console(
                    color_system="auto" if colored else None,
                    force_terminal=tty,
                    no_color=not colored,
                    emoji=emoji,
                    soft_wrap=True,
                    highlight=False,
                    stderr=stderr,
                )
                self._cache[key] = console
        return console


@lru_cache(maxsize=1)
def get_console_manager() -> RichConsoleManager:
    """Return the process-wide :class:`RichConsoleManager`."""

    return RichConsoleManager()


__all__ = [
    "RichConsoleManager",
    "Stream",
    "detect_tty",
    "get_console_manager",
]
