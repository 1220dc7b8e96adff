"""Tests for executable detection (infra/executable_detector.py).

All tests mock :func:`shutil.which`, no system dependency.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from ytdl_runner.exceptions import ExecutableNotFoundError
from ytdl_runner.infra.executable_detector import (
    ExecutableStatus,
    _ffmpeg_install_commands,
    _ytdlp_install_commands,
    detect_executable,
    detect_ffmpeg,
    detect_ytdlp,
    require_executable,
)


# ---------------------------------------------------------------------------
# detect_*
# ---------------------------------------------------------------------------

class TestDetectExecutable:
    @patch("ytdl_runner.infra.executable_detector.shutil.which")
    def test_found(self, mock_which: MagicMock) -> None:
        mock_which.return_value = "/usr/bin/yt-dlp"
        status = detect_ytdlp()

        assert status.found is True
        assert status.name == "yt-dlp"
        assert isinstance(status.path, Path)
        assert status.version_hint.startswith("found at")
        assert status.install_commands == ()
        mock_which.assert_called_once_with("yt-dlp")

    @patch("ytdl_runner.infra.executable_detector.shutil.which", return_value=None)
    def test_ytdlp_missing_suggests_pip(self, _mock_which: MagicMock) -> None:
        status = detect_ytdlp()
        assert status.found is False
        assert status.path is None
        assert status.version_hint == "not found"
        assert "pip install --upgrade yt-dlp" in status.install_commands

    @patch("ytdl_runner.infra.executable_detector.shutil.which", return_value=None)
    def test_custom_ytdlp_path(self, mock_which: MagicMock) -> None:
        status = detect_ytdlp("/opt/tools/yt-dlp")
        mock_which.assert_called_once_with("/opt/tools/yt-dlp")
        assert status.install_commands

    @patch("ytdl_runner.infra.executable_detector.shutil.which", return_value=None)
    def test_ffmpeg_missing(self, _mock_which: MagicMock) -> None:
        status = detect_ffmpeg()
        assert status.name == "ffmpeg"
        assert len(status.install_commands) > 0

    @patch("ytdl_runner.infra.executable_detector.shutil.which", return_value=None)
    def test_unknown_tool_has_no_guidance(self, _mock_which: MagicMock) -> None:
        assert detect_executable("something-else").install_commands == ()


# ---------------------------------------------------------------------------
# require_executable
# ---------------------------------------------------------------------------

class TestRequireExecutable:
    @patch("ytdl_runner.infra.executable_detector.shutil.which", return_value="/usr/bin/ffmpeg")
    def test_found_returns_path(self, _mock_which: MagicMock) -> None:
        assert isinstance(require_executable("ffmpeg"), Path)

    @patch("ytdl_runner.infra.executable_detector.shutil.which", return_value=None)
    def test_missing_raises_with_hint(self, _mock_which: MagicMock) -> None:
        with pytest.raises(ExecutableNotFoundError, match="not installed") as exc_info:
            require_executable("yt-dlp")
        assert exc_info.value.hint is not None
        assert "Install yt-dlp" in exc_info.value.hint

    @patch("ytdl_runner.infra.executable_detector.shutil.which", return_value=None)
    def test_missing_unknown_tool_has_no_hint(self, _mock_which: MagicMock) -> None:
        with pytest.raises(ExecutableNotFoundError) as exc_info:
            require_executable("mystery")
        assert exc_info.value.hint is None


# ---------------------------------------------------------------------------
# Platform install commands
# ---------------------------------------------------------------------------

class TestPlatformInstallCommands:
    @patch("ytdl_runner.infra.executable_detector.platform.system", return_value="Windows")
    def test_windows(self, _mock_sys: MagicMock) -> None:
        assert "winget install Gyan.FFmpeg" in _ffmpeg_install_commands()
        assert "winget install yt-dlp.yt-dlp" in _ytdlp_install_commands()

    @patch("ytdl_runner.infra.executable_detector.platform.system", return_value="Linux")
    def test_linux(self, _mock_sys: MagicMock) -> None:
        assert any("apt" in c for c in _ffmpeg_install_commands())
        assert _ytdlp_install_commands() == ("pip install --upgrade yt-dlp",)

    @patch("ytdl_runner.infra.executable_detector.platform.system", return_value="Darwin")
    def test_darwin(self, _mock_sys: MagicMock) -> None:
        assert _ffmpeg_install_commands() == ("brew install ffmpeg",)
        assert "brew install yt-dlp" in _ytdlp_install_commands()


class TestExecutableStatus:
    def test_frozen(self) -> None:
        status = ExecutableStatus(
            name="yt-dlp",
            found=True,
            path=Path("/usr/bin/yt-dlp"),
            version_hint="found",
            install_commands=(),
        )
        with pytest.raises(AttributeError):
            status.found = False  # type: ignore[misc]
