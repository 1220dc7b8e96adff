"""Console helpers for the CLI layer, with Rich loaded lazily.

Bootstrap paths (``--help``, ``--version``) must keep working when Rich
is missing, so nothing here imports Rich at module level.
"""

from __future__ import annotations

import sys
from typing import Any

from ytdl_runner.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console(*, stderr: bool = True) -> Any:
    """Create a Rich console writing to stderr (or stdout)."""
    console_class = _load_rich_console_class()
    return console_class(stderr=stderr)


def escape_markup(text: str) -> str:
    """Escape Rich markup in *text*; identity when Rich is missing.

    yt-dlp output is full of ``[youtube]``-style prefixes that Rich would
    otherwise read as style tags.
    """
    try:
        from rich.markup import escape
    except ModuleNotFoundError:
        return text
    return escape(text)


class _ConsoleProxy:
    """``print``-compatible proxy that degrades to plain text."""

    def __init__(self, *, stderr: bool = True) -> None:
        self._stderr: bool = stderr

    def print(self, *objects: object, **rich_options: Any) -> None:
        """Render with Rich when available, else plain ``print``.

        *rich_options* (``markup``, ``highlight`` …) are forwarded to
        ``Console.print`` and ignored by the plain fallback.
        """
        try:
            rich_console = get_rich_console(stderr=self._stderr)
        except EnvironmentError:
            print(*objects, file=sys.stderr if self._stderr else sys.stdout)
            return
        rich_console.print(*objects, **rich_options)


console = _ConsoleProxy()
"""Diagnostics and status messages (stderr)."""

result_console = _ConsoleProxy(stderr=False)
"""Command results meant for piping, e.g. transcript text (stdout)."""
