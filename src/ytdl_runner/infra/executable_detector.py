"""Infrastructure: executable detection and platform guidance.

Locates the external tools ytdl-runner drives (``yt-dlp``, ``ffmpeg``)
on the system PATH and provides platform-specific installation guidance
when one is missing.

Rules
-----
* Detection via :func:`shutil.which` only, no subprocess.
* No permanent PATH modification.
* No automatic installation.
* No ``print()`` callers handle user-facing output.
"""

from __future__ import annotations

import platform
import shutil
from dataclasses import dataclass
from pathlib import Path

from ytdl_runner.exceptions import ExecutableNotFoundError


@dataclass(frozen=True, slots=True)
class ExecutableStatus:
    """Result of a PATH lookup for one executable.

    Attributes
    ----------
    name : str
        The executable name or path that was looked up.
    found : bool
        Whether the executable was located.
    path : Path | None
        Absolute path to the binary, or ``None``.
    version_hint : str
        Human-readable status string (e.g. ``"found at …"`` or ``"not found"``).
    install_commands : tuple[str, ...]
        Suggested shell commands for installing the tool on the current
        platform.  Empty when it is already present.
    """

    name: str
    found: bool
    path: Path | None
    version_hint: str
    install_commands: tuple[str, ...]


def detect_executable(name: str) -> ExecutableStatus:
    """Probe the system for *name*.

    Returns an :class:`ExecutableStatus` regardless of the outcome; the
    caller decides whether to abort or merely warn.
    """
    result = shutil.which(name)

    if result is not None:
        resolved = Path(result).resolve()
        return ExecutableStatus(
            name=name,
            found=True,
            path=resolved,
            version_hint=f"found at {resolved}",
            install_commands=(),
        )

    return ExecutableStatus(
        name=name,
        found=False,
        path=None,
        version_hint="not found",
        install_commands=_install_commands(name),
    )


def detect_ytdlp(command: str = "yt-dlp") -> ExecutableStatus:
    return detect_executable(command)


def detect_ffmpeg() -> ExecutableStatus:
    return detect_executable("ffmpeg")


def require_executable(name: str) -> Path:
    """Locate *name* or raise :class:`ExecutableNotFoundError`."""
    status = detect_executable(name)
    if not status.found or status.path is None:
        hint_lines: list[str] = []
        if status.install_commands:
            hint_lines.append(f"Install {Path(name).name} using one of:")
            hint_lines.extend(f"  {cmd}" for cmd in status.install_commands)
        raise ExecutableNotFoundError(
            f"{name} is not installed or not on PATH.",
            hint="\n".join(hint_lines) if hint_lines else None,
        )
    return status.path


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

def _install_commands(name: str) -> tuple[str, ...]:
    tool = Path(name).name.lower()
    if tool.startswith("yt-dlp"):
        return _ytdlp_install_commands()
    if tool.startswith("ffmpeg"):
        return _ffmpeg_install_commands()
    return ()


def _ytdlp_install_commands() -> tuple[str, ...]:
    """Return yt-dlp install commands appropriate for the current OS."""
    system = platform.system().lower()
    commands: list[str] = ["pip install --upgrade yt-dlp"]
    if system == "windows":
        commands.append("winget install yt-dlp.yt-dlp")
    elif system == "darwin":
        commands.append("brew install yt-dlp")
    return tuple(commands)


def _ffmpeg_install_commands() -> tuple[str, ...]:
    """Return ffmpeg install commands appropriate for the current OS."""
    system = platform.system().lower()
    if system == "windows":
        return (
            "winget install Gyan.FFmpeg",
            "choco install ffmpeg",
        )
    if system == "linux":
        return (
            "sudo apt install ffmpeg",
            "sudo dnf install ffmpeg",
            "sudo pacman -S ffmpeg",
        )
    if system == "darwin":
        return ("brew install ffmpeg",)
    # Fallback, generic guidance.
    return ("Please install ffmpeg from https://ffmpeg.org/download.html",)
