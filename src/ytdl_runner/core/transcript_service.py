"""Core transcript service: subtitles via yt-dlp, cleaned to plain text.

yt-dlp is asked to skip the media download and write manual or
automatic subtitles converted to SRT.  The resulting file is located by
the unique marker embedded in the output template, then reduced to a
transcript with :func:`~ytdl_runner.core.text.clean_subtitle_to_transcript`.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from ytdl_runner.core.download_service import output_tail
from ytdl_runner.core.models import SUBTITLE_EXTENSIONS, TranscriptResult
from ytdl_runner.core.protocols import CommandRunner, Workspace
from ytdl_runner.core.text import clean_subtitle_to_transcript, formatted_timestamp
from ytdl_runner.core.urls import require_url
from ytdl_runner.exceptions import (
    DownloadFailedError,
    ExecutionError,
    NonZeroExitError,
    OutputNotFoundError,
    SubtitlesNotFoundError,
    YtdlRunnerError,
    append_ytdlp_upgrade_suggestion,
)


class TranscriptService:
    """Stateless service that fetches one transcript per call."""

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

    @staticmethod
    def build_arguments(url: str, language: str, output_template: str) -> list[str]:
        """Return the yt-dlp argument list for a subtitle-only run."""
        return [
            "--skip-download",
            "--write-subs",
            "--write-auto-subs",
            "--sub-langs",
            language,
            "--convert-subs",
            "srt",
            "-o",
            output_template,
            url,
        ]

    def fetch_transcript(
        self,
        url: str,
        work_dir: Path,
        language: str = "en",
        *,
        now: datetime | None = None,
    ) -> TranscriptResult:
        """Fetch subtitles for *url* and return them as a transcript.

        Raises
        ------
        InvalidURLError
            If *url* is empty or malformed.
        DownloadFailedError
            When yt-dlp cannot be started or exits with an error.
        SubtitlesNotFoundError
            When yt-dlp wrote no subtitle file for *language*.
        """
        checked_url = require_url(url)
        language = language.strip() or "en"
        self._workspace.ensure_directory(work_dir)

        marker = f"subs_{formatted_timestamp(now)}"
        output_template = str(work_dir / f"{marker}.%(ext)s")
        arguments = self.build_arguments(checked_url, language, output_template)

        try:
            self._runner.run_sync(self._ytdlp_command, arguments)
        except NonZeroExitError as exc:
            raise DownloadFailedError(
                f"Subtitle download failed: yt-dlp exited with code {exc.code}\n"
                f"{output_tail(exc.combined_output)}".rstrip(),
                hint=append_ytdlp_upgrade_suggestion("Check the URL and language code."),
            ) from exc
        except ExecutionError as exc:
            raise DownloadFailedError(f"Subtitle download failed: {exc}", hint=exc.hint) from exc
        except YtdlRunnerError:
            raise
        except Exception as exc:
            raise DownloadFailedError(f"Unexpected subtitle download error: {exc}") from exc

        try:
            path, matched = self._workspace.locate_output(work_dir, marker, SUBTITLE_EXTENSIONS)
        except OutputNotFoundError as exc:
            raise self._no_subtitles(language) from exc
        if not matched or path.suffix.lower().lstrip(".") not in SUBTITLE_EXTENSIONS:
            raise self._no_subtitles(language)

        text = clean_subtitle_to_transcript(self._workspace.read_text(path))
        return TranscriptResult(path=path, language=language, text=text)

    @staticmethod
    def _no_subtitles(language: str) -> SubtitlesNotFoundError:
        return SubtitlesNotFoundError(
            f"No subtitles available in language '{language}'.",
            hint="Try another language code with --lang.",
        )
