"""Infrastructure: local filesystem operations around a yt-dlp run.

Implements :class:`~ytdl_runner.core.protocols.Workspace` on top of
:mod:`pathlib`.  ``OSError`` from directory creation and file reads is
re-raised as a typed :class:`~ytdl_runner.exceptions.YtdlRunnerError`
subclass; cleanup failures are logged and reported as ``False``.

Output discovery
----------------
yt-dlp chooses the final extension itself, so the service passes a
unique *marker* (``video_<timestamp>``) embedded in the output template.
When no file carries the marker, e.g. a post-processor renamed it,
the most recently modified file with a recognised extension is used
and flagged as a fallback match.  That fallback can pick the wrong file
when several downloads share one directory at the same time.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Sequence
from pathlib import Path

from ytdl_runner.exceptions import EnvironmentCheckError, OutputNotFoundError

logger = logging.getLogger(__name__)


class LocalWorkspace:
    """Concrete :class:`Workspace` backed by the local filesystem."""

    def ensure_directory(self, directory: Path) -> None:
        """Create *directory* and its parents when missing.

        Raises
        ------
        EnvironmentCheckError
            If the directory cannot be created.
        """
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise EnvironmentCheckError(
                f"Cannot create directory {directory}: {exc}",
                hint="Choose a writable location with --output-dir.",
            ) from exc

    def locate_output(
        self,
        directory: Path,
        marker: str,
        extensions: Sequence[str],
    ) -> tuple[Path, bool]:
        """Return ``(path, matched_marker)`` for the file a run produced.

        Raises
        ------
        OutputNotFoundError
            When neither a marker match nor a fallback candidate exists.
        """
        files = self._list_files(directory)

        marked = sorted(f for f in files if marker in f.name)
        for candidate in marked:
            if _has_extension(candidate, extensions):
                return candidate, True
        if marked:
            return marked[0], True

        fallback = [f for f in files if _has_extension(f, extensions)]
        if not fallback:
            names = ", ".join(sorted(f.name for f in files)) or "(empty)"
            raise OutputNotFoundError(
                f"No output file found after download. Files in directory: {names}",
            )
        latest = max(fallback, key=lambda f: (f.stat().st_mtime, f.name))
        return latest, False

    def file_size(self, path: Path) -> int:
        try:
            return path.stat().st_size
        except OSError as exc:
            raise OutputNotFoundError(f"Cannot stat {path}: {exc}") from exc

    def read_text(self, path: Path) -> str:
        """Read *path* as UTF-8, replacing undecodable bytes."""
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise OutputNotFoundError(f"Cannot read {path}: {exc}") from exc

    @staticmethod
    def _list_files(directory: Path) -> list[Path]:
        try:
            return [entry for entry in directory.iterdir() if entry.is_file()]
        except FileNotFoundError as exc:
            raise OutputNotFoundError(
                f"Output directory does not exist: {directory}",
            ) from exc


def safe_cleanup(directory: Path) -> bool:
    """Recursively remove *directory*.

    A missing directory counts as success.  Returns ``False`` (after
    logging the error) when removal fails.
    """
    if not directory.exists():
        return True
    try:
        shutil.rmtree(directory)
    except OSError as exc:
        logger.error("Error cleaning up directory %s: %s", directory, exc)
        return False
    return True


def _has_extension(path: Path, extensions: Sequence[str]) -> bool:
    suffix = path.suffix.lower().lstrip(".")
    return suffix in {ext.lower().lstrip(".") for ext in extensions}
