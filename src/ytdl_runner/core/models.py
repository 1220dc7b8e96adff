"""Domain models for ytdl-runner.

Result models are **frozen** dataclasses, immutable value objects with
no behaviour beyond data access and rendering.  The one exception is
:class:`ProcessInvocation`, the transient record a single process run
mutates while output arrives and seals exactly once on termination.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

RESOLUTIONS: tuple[str, ...] = ("480p", "720p", "1080p", "best")
"""Resolution presets understood by the download service."""

DEFAULT_RESOLUTION: str = "720p"

VIDEO_EXTENSIONS: tuple[str, ...] = ("mp4", "webm", "mkv", "avi")
"""Extensions accepted by the output-discovery fallback."""

SUBTITLE_EXTENSIONS: tuple[str, ...] = ("srt", "vtt")

_MIB: int = 1024 * 1024


# ---------------------------------------------------------------------------
# Process invocation record
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ProcessInvocation:
    """Mutable record of one request to run an external program.

    Buffers grow as chunks arrive.  :meth:`finalize_exit` and
    :meth:`finalize_launch_error` seal the record; only the first call
    takes effect and later ones are ignored.
    """

    command: str
    arguments: tuple[str, ...]
    stdout_chunks: list[str] = field(default_factory=list)
    stderr_chunks: list[str] = field(default_factory=list)
    exit_status: int | None = None
    terminal_error: str | None = None
    _finalized: bool = False

    @property
    def captured_stdout(self) -> str:
        return "".join(self.stdout_chunks)

    @property
    def captured_stderr(self) -> str:
        return "".join(self.stderr_chunks)

    @property
    def combined_output(self) -> str:
        """Everything captured, stdout first then stderr."""
        return self.captured_stdout + self.captured_stderr

    @property
    def finalized(self) -> bool:
        return self._finalized

    def append_stdout(self, chunk: str) -> None:
        if not self._finalized:
            self.stdout_chunks.append(chunk)

    def append_stderr(self, chunk: str) -> None:
        if not self._finalized:
            self.stderr_chunks.append(chunk)

    def finalize_exit(self, code: int) -> bool:
        """Record the exit status.  Returns ``False`` if already sealed."""
        if self._finalized:
            return False
        self.exit_status = code
        self._finalized = True
        return True

    def finalize_launch_error(self, reason: str) -> bool:
        """Record a launch failure.  Returns ``False`` if already sealed."""
        if self._finalized:
            return False
        self.terminal_error = reason
        self._finalized = True
        return True


# ---------------------------------------------------------------------------
# Download / transcript results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class DownloadResult:
    """Outcome of a completed download."""

    path: Path
    """Absolute or workspace-relative path of the downloaded file."""

    size_bytes: int
    """Size of the file on disk."""

    matched_marker: bool
    """``False`` when the file was found only by the extension fallback."""

    output: str
    """Combined yt-dlp output, kept for diagnostics."""

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def size_mb(self) -> int:
        """Size in whole mebibytes, halves rounded up."""
        return (self.size_bytes + _MIB // 2) // _MIB

    def describe(self) -> str:
        """Render a one-line human summary of the download."""
        directory = self.path.parent
        if not self.matched_marker:
            return f'Video downloaded as "{self.filename}" to {directory}'
        return (
            f'Video successfully downloaded as "{self.filename}" '
            f"({self.size_mb}MB) to {directory}"
        )


@dataclass(frozen=True, slots=True)
class TranscriptResult:
    """Plain-text transcript extracted from a subtitle file."""

    path: Path
    """Subtitle file the transcript was built from."""

    language: str
    """Requested subtitle language code."""

    text: str
    """Cleaned transcript text: single spaces, no cue metadata."""
