"""Tests for the download pipeline (core/download_service.py).

The :class:`CommandRunner` is replaced by doubles, yt-dlp is never
spawned and no internet access is required.  The workspace is a real
:class:`LocalWorkspace` rooted in ``tmp_path``.

Coverage:
* Resolution → format-spec mapping.
* Argument list construction.
* Output discovery by marker and by extension fallback.
* Exception wrapping (execution errors → DownloadFailedError).
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from ytdl_runner.core.download_service import DownloadService, output_tail
from ytdl_runner.exceptions import (
    DownloadFailedError,
    FormatSelectionError,
    InvalidURLError,
    LaunchFailureError,
    NonZeroExitError,
    OutputNotFoundError,
)
from ytdl_runner.infra.workspace import LocalWorkspace

URL = "https://www.youtube.com/watch?v=abc123"
NOW = datetime(2024, 5, 1, 12, 30, 45, 123000, tzinfo=timezone.utc)
MARKER = "video_2024-05-01_12-30-45-123Z"


# ---------------------------------------------------------------------------
# Format spec
# ---------------------------------------------------------------------------

class TestBuildFormatSpec:
    @pytest.mark.parametrize(
        ("resolution", "expected"),
        [
            ("480p", "worst[height>=360]/best[height<=480]/worst"),
            ("720p", "best[height<=720]/best"),
            ("1080p", "best[height<=1080]/best"),
            ("best", "best"),
        ],
    )
    def test_presets(self, resolution: str, expected: str) -> None:
        assert DownloadService.build_format_spec(resolution) == expected

    def test_case_insensitive(self) -> None:
        assert DownloadService.build_format_spec("1080P") == "best[height<=1080]/best"

    def test_unknown_raises(self) -> None:
        with pytest.raises(FormatSelectionError) as exc_info:
            DownloadService.build_format_spec("4k")
        assert exc_info.value.hint is not None
        assert "720p" in exc_info.value.hint


class TestBuildArguments:
    def test_full_argument_list(self) -> None:
        args = DownloadService.build_arguments(URL, "720p", "out/video_x.%(ext)s")
        assert args == [
            "--verbose",
            "-f",
            "best[height<=720]/best",
            "-o",
            "out/video_x.%(ext)s",
            "--no-mtime",
            URL,
        ]

    def test_url_is_last_and_unquoted(self) -> None:
        tricky = "https://example.com/v?a=1&b=$(whoami)"
        assert DownloadService.build_arguments(tricky, "best", "t")[-1] == tricky


# ---------------------------------------------------------------------------
# download: happy paths
# ---------------------------------------------------------------------------

class TestDownload:
    def test_marker_match(self, tmp_path: Path, writing_runner_factory) -> None:
        runner = writing_runner_factory(suffixes=("mp4",), content="x" * 3000, output="done")
        svc = DownloadService(runner, LocalWorkspace())

        result = svc.download(URL, tmp_path / "dl", "1080p", now=NOW)

        assert result.path == tmp_path / "dl" / f"{MARKER}.mp4"
        assert result.matched_marker is True
        assert result.size_bytes == 3000
        assert result.output == "done"

    def test_runner_receives_command_and_template(self, tmp_path: Path, writing_runner_factory) -> None:
        runner = writing_runner_factory()
        svc = DownloadService(runner, LocalWorkspace(), ytdlp_command="/opt/yt-dlp")

        svc.download(URL, tmp_path, now=NOW)

        command, args = runner.calls[0]
        assert command == "/opt/yt-dlp"
        assert args[args.index("-o") + 1] == str(tmp_path / f"{MARKER}.%(ext)s")
        assert args[args.index("-f") + 1] == "best[height<=720]/best"

    def test_creates_missing_directory(self, tmp_path: Path, writing_runner_factory) -> None:
        target = tmp_path / "nested" / "downloads"
        DownloadService(writing_runner_factory(), LocalWorkspace()).download(URL, target, now=NOW)
        assert target.is_dir()

    def test_extension_fallback(self, tmp_path: Path) -> None:
        (tmp_path / "renamed by postprocessor.webm").write_bytes(b"abc")
        runner = MagicMock()
        runner.run_sync.return_value = "ok"

        result = DownloadService(runner, LocalWorkspace()).download(URL, tmp_path, now=NOW)

        assert result.filename == "renamed by postprocessor.webm"
        assert result.matched_marker is False
        assert result.describe().startswith('Video downloaded as "renamed by postprocessor.webm"')

    def test_no_output_raises(self, tmp_path: Path) -> None:
        (tmp_path / "notes.txt").write_text("hi", encoding="utf-8")
        runner = MagicMock()
        runner.run_sync.return_value = "ok"

        with pytest.raises(OutputNotFoundError, match="notes.txt"):
            DownloadService(runner, LocalWorkspace()).download(URL, tmp_path, now=NOW)


# ---------------------------------------------------------------------------
# download: validation and error mapping
# ---------------------------------------------------------------------------

class TestDownloadErrors:
    def test_invalid_url_never_spawns(self, tmp_path: Path) -> None:
        runner = MagicMock()
        with pytest.raises(InvalidURLError):
            DownloadService(runner, LocalWorkspace()).download("not a url", tmp_path)
        runner.run_sync.assert_not_called()

    def test_unknown_resolution_never_touches_disk(self, tmp_path: Path) -> None:
        runner = MagicMock()
        target = tmp_path / "never"
        with pytest.raises(FormatSelectionError):
            DownloadService(runner, LocalWorkspace()).download(URL, target, "8k")
        assert not target.exists()
        runner.run_sync.assert_not_called()

    def test_non_zero_exit_wrapped(self, tmp_path: Path) -> None:
        runner = MagicMock()
        original = NonZeroExitError(1, "[youtube] abc: Video unavailable\nERROR: gone\n")
        runner.run_sync.side_effect = original

        with pytest.raises(DownloadFailedError) as exc_info:
            DownloadService(runner, LocalWorkspace()).download(URL, tmp_path, now=NOW)

        err = exc_info.value
        assert err.__cause__ is original
        assert "exited with code 1" in str(err)
        assert "ERROR: gone" in str(err)
        assert err.hint is not None
        assert "pip install --upgrade yt-dlp" in err.hint

    def test_launch_failure_wrapped(self, tmp_path: Path) -> None:
        runner = MagicMock()
        runner.run_sync.side_effect = LaunchFailureError("yt-dlp", "No such file or directory")

        with pytest.raises(DownloadFailedError, match="No such file or directory") as exc_info:
            DownloadService(runner, LocalWorkspace()).download(URL, tmp_path, now=NOW)
        assert exc_info.value.hint is not None

    def test_unexpected_error_wrapped_and_chained(self, tmp_path: Path) -> None:
        runner = MagicMock()
        original = RuntimeError("kaboom")
        runner.run_sync.side_effect = original

        with pytest.raises(DownloadFailedError, match="Unexpected") as exc_info:
            DownloadService(runner, LocalWorkspace()).download(URL, tmp_path, now=NOW)
        assert exc_info.value.__cause__ is original


class TestOutputTail:
    def test_keeps_last_non_blank_lines(self) -> None:
        text = "\n".join(f"line {i}" for i in range(10)) + "\n\n"
        assert output_tail(text, lines=2) == "line 8\nline 9"

    def test_empty(self) -> None:
        assert output_tail("") == ""
