"""Rich progress display driven by yt-dlp's textual output.

yt-dlp runs as a child process, so progress arrives as text such as
``[download]  42.3% of 10.00MiB at 1.20MiB/s ETA 00:07``.  The
:class:`RichProgressSink` satisfies the
:class:`~ytdl_runner.core.protocols.OutputSink` protocol: it parses those
lines into a Rich :class:`~rich.progress.Progress` bar and echoes every
other line dimmed above the bar.

Design
------
* Chunks may split lines anywhere; a per-stream buffer reassembles them.
* ``\\r`` and ``\\n`` both terminate a line (yt-dlp redraws with ``\\r``).
* Shutdown-safe: once stopped, output is ignored.
* No ``print()`` Rich handles all rendering.
"""

from __future__ import annotations

import re
import shlex
from collections.abc import Sequence
from typing import Any

from ytdl_runner.cli.console import get_rich_console
from ytdl_runner.exceptions import EnvironmentError

_PERCENT = re.compile(r"^\[download\]\s+(\d+(?:\.\d+)?)%")
_DESTINATION = re.compile(r"^\[download\] Destination:\s*(.+)$")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class RichProgressSink:
    """Output sink rendering a Rich progress bar.

    Usage::

        with RichProgressSink() as sink:
            runner = ProcessRunner(sink)
            runner.run_sync("yt-dlp", arguments)

    Parameters
    ----------
    echo:
        When ``True`` (default), non-progress lines are printed dimmed.
    """

    def __init__(self, *, echo: bool = True) -> None:
        try:
            from rich.progress import (
                BarColumn,
                Progress,
                SpinnerColumn,
                TaskProgressColumn,
                TextColumn,
                TimeElapsedColumn,
            )
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "rich is not installed. Install with: pip install rich",
            ) from exc

        self._progress: Any = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=get_rich_console(),
            transient=False,
        )
        self._echo: bool = echo
        self._task_id: Any = None
        self._started: bool = False
        self._pending: dict[str, str] = {"stdout": "", "stderr": ""}

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> RichProgressSink:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the Rich progress display."""
        if not self._started:
            self._progress.start()
            self._started = True

    def stop(self) -> None:
        """Flush partial lines and stop the display (idempotent)."""
        if self._started:
            for stream in ("stdout", "stderr"):
                leftover = self._pending[stream]
                self._pending[stream] = ""
                if leftover.strip():
                    self._handle_line(leftover)
            self._progress.stop()
            self._started = False

    # ------------------------------------------------------------------
    # OutputSink protocol
    # ------------------------------------------------------------------

    def command_started(self, command: str, arguments: Sequence[str]) -> None:
        if not self._started:
            return
        self._progress.console.print(
            f"Executing: {shlex.join([command, *arguments])}",
            markup=False,
            highlight=False,
            style="dim",
        )

    def stdout_chunk(self, chunk: str) -> None:
        self._feed("stdout", chunk)

    def stderr_chunk(self, chunk: str) -> None:
        self._feed("stderr", chunk)

    def process_exited(self, code: int) -> None:
        if not self._started:
            return
        if code == 0:
            self._complete()
        style = "green" if code == 0 else "red"
        self._progress.console.print(f"Process exited with code: {code}", style=style)

    # ------------------------------------------------------------------
    # Internal handlers
    # ------------------------------------------------------------------

    def _feed(self, stream: str, chunk: str) -> None:
        if not self._started:
            return
        parts = _LINE_BREAK.split(self._pending[stream] + chunk)
        self._pending[stream] = parts.pop()
        for line in parts:
            if line.strip():
                self._handle_line(line)

    def _handle_line(self, line: str) -> None:
        stripped = line.strip()

        destination = _DESTINATION.match(stripped)
        if destination is not None:
            self._ensure_task(destination.group(1))

        percent = _PERCENT.match(stripped)
        if percent is not None:
            value = _safe_float(percent.group(1))
            if value is not None:
                self._ensure_task("Downloading")
                self._progress.update(self._task_id, completed=min(value, 100.0))
            return

        if self._echo:
            self._progress.console.print(stripped, markup=False, highlight=False, style="dim")

    def _ensure_task(self, description: str) -> None:
        if self._task_id is not None:
            return
        # Use just the base filename for display.
        display_name = description.rsplit("/", 1)[-1].rsplit("\\", 1)[-1]
        if len(display_name) > 50:
            display_name = display_name[:47] + "..."
        self._task_id = self._progress.add_task(display_name, total=100.0)

    def _complete(self) -> None:
        if self._task_id is not None:
            self._progress.update(self._task_id, completed=100.0)


# ---------------------------------------------------------------------------
# Utility
# ---------------------------------------------------------------------------

def _safe_float(value: object) -> float | None:
    """Convert *value* to ``float`` or return ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float, str)):
            return float(value)
        return None
    except (TypeError, ValueError):
        return None
