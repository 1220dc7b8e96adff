"""Core download service: orchestrates a single yt-dlp download.

This service delegates process execution to a
:class:`~ytdl_runner.core.protocols.CommandRunner` and filesystem work to
a :class:`~ytdl_runner.core.protocols.Workspace`, both injected at
construction time.  It is responsible for:

* Mapping a resolution preset to a yt-dlp format string.
* Building the yt-dlp argument list.
* Locating the downloaded file.
* Ensuring only :class:`~ytdl_runner.exceptions.YtdlRunnerError`
  subclasses escape.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from ytdl_runner.core.models import DEFAULT_RESOLUTION, RESOLUTIONS, VIDEO_EXTENSIONS, DownloadResult
from ytdl_runner.core.protocols import CommandRunner, Workspace
from ytdl_runner.core.text import formatted_timestamp
from ytdl_runner.core.urls import require_url
from ytdl_runner.exceptions import (
    DownloadFailedError,
    ExecutionError,
    FormatSelectionError,
    LaunchFailureError,
    NonZeroExitError,
    YtdlRunnerError,
    append_ytdlp_upgrade_suggestion,
)

_FORMAT_MAP: dict[str, str] = {
    "480p": "worst[height>=360]/best[height<=480]/worst",
    "720p": "best[height<=720]/best",
    "1080p": "best[height<=1080]/best",
    "best": "best",
}

_OUTPUT_TAIL_LINES: int = 5


class DownloadService:
    """Stateless service that drives one download per call.

    Parameters
    ----------
    runner:
        Any object satisfying the :class:`CommandRunner` protocol.
    workspace:
        Any object satisfying the :class:`Workspace` protocol.
    ytdlp_command:
        Name or path of the yt-dlp executable.
    """

    def __init__(
        self,
        runner: CommandRunner,
        workspace: Workspace,
        *,
        ytdlp_command: str = "yt-dlp",
    ) -> None:
        self._runner: CommandRunner = runner
        self._workspace: Workspace = workspace
        self._ytdlp_command: str = ytdlp_command

    # ------------------------------------------------------------------
    # Argument construction (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def build_format_spec(resolution: str) -> str:
        """Return the yt-dlp ``-f`` selector for a resolution preset.

        Each preset falls back to a more permissive selector so that
        videos without the requested height still download.

        Raises
        ------
        FormatSelectionError
            If *resolution* is not one of :data:`RESOLUTIONS`.
        """
        try:
            return _FORMAT_MAP[resolution.lower()]
        except KeyError:
            raise FormatSelectionError(
                f"Unsupported resolution: {resolution}",
                hint=f"Use one of: {', '.join(RESOLUTIONS)}",
            ) from None

    @classmethod
    def build_arguments(cls, url: str, resolution: str, output_template: str) -> list[str]:
        """Return the full yt-dlp argument list (without the executable)."""
        return [
            "--verbose",
            "-f",
            cls.build_format_spec(resolution),
            "-o",
            output_template,
            "--no-mtime",
            url,
        ]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def download(
        self,
        url: str,
        downloads_dir: Path,
        resolution: str = DEFAULT_RESOLUTION,
        *,
        now: datetime | None = None,
    ) -> DownloadResult:
        """Download *url* into *downloads_dir*.

        Parameters
        ----------
        url:
            The video page URL.
        downloads_dir:
            Target directory; created when missing.
        resolution:
            One of :data:`RESOLUTIONS`.
        now:
            Pins the timestamp used in the output name (tests).

        Raises
        ------
        InvalidURLError
            If *url* is empty or malformed.
        FormatSelectionError
            If *resolution* is unknown.
        DownloadFailedError
            When yt-dlp cannot be started or exits with an error.
        OutputNotFoundError
            When yt-dlp succeeded but no output file can be found.
        """
        checked_url = require_url(url)
        # Reject unknown presets before touching the filesystem.
        self.build_format_spec(resolution)

        self._workspace.ensure_directory(downloads_dir)

        marker = f"video_{formatted_timestamp(now)}"
        output_template = str(downloads_dir / f"{marker}.%(ext)s")
        arguments = self.build_arguments(checked_url, resolution, output_template)

        output = self._execute(arguments)

        path, matched = self._workspace.locate_output(downloads_dir, marker, VIDEO_EXTENSIONS)
        return DownloadResult(
            path=path,
            size_bytes=self._workspace.file_size(path),
            matched_marker=matched,
            output=output,
        )

    # ------------------------------------------------------------------
    # Runner delegation (safe boundary)
    # ------------------------------------------------------------------

    def _execute(self, arguments: list[str]) -> str:
        """Call the runner and map execution failures to domain errors."""
        try:
            return self._runner.run_sync(self._ytdlp_command, arguments)
        except ExecutionError as exc:
            raise _as_download_failure(exc) from exc
        except YtdlRunnerError:
            raise
        except Exception as exc:
            raise DownloadFailedError(
                f"Unexpected download error: {exc}",
            ) from exc


def _as_download_failure(exc: ExecutionError) -> DownloadFailedError:
    if isinstance(exc, LaunchFailureError):
        return DownloadFailedError(
            f"Video download failed: {exc.reason}",
            hint=exc.hint or "Install yt-dlp with: pip install yt-dlp",
        )
    if isinstance(exc, NonZeroExitError):
        return DownloadFailedError(
            f"Video download failed: yt-dlp exited with code {exc.code}\n"
            f"{output_tail(exc.combined_output)}".rstrip(),
            hint=append_ytdlp_upgrade_suggestion(
                "Check the URL, your network, or try a different resolution.",
            ),
        )
    return DownloadFailedError(f"Video download failed: {exc}")


def output_tail(output: str, lines: int = _OUTPUT_TAIL_LINES) -> str:
    """Return the last *lines* non-blank lines of *output*."""
    meaningful = [line for line in output.splitlines() if line.strip()]
    return "\n".join(meaningful[-lines:])
