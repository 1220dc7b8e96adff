"""``ytdl-runner doctor`` environment diagnostics command.

Checks that the yt-dlp executable the runner will spawn is reachable,
reports the supporting tools, and renders a Rich table (or a plain
table when Rich is missing).
"""

from __future__ import annotations

import platform
import sys

from ytdl_runner.cli import exit_codes
from ytdl_runner.cli.console import console
from ytdl_runner.infra.executable_detector import detect_ffmpeg, detect_ytdlp
from ytdl_runner.version import __version__

Check = tuple[str, str, str]


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> Check:
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _ytdlp_check(command: str = "yt-dlp") -> Check:
    """Return the yt-dlp row; a missing executable is a hard failure."""
    status_obj = detect_ytdlp(command)
    if status_obj.found:
        return "yt-dlp", str(status_obj.path), "[green]OK[/green]"
    return "yt-dlp", f"{command} not found", "[red]FAIL[/red]"


def _ffmpeg_check() -> Check:
    """Return the ffmpeg row; yt-dlp only needs it for merging."""
    status_obj = detect_ffmpeg()
    if status_obj.found:
        path_str = str(status_obj.path) if status_obj.path else "found"
        return "ffmpeg", path_str, "[green]OK[/green]"
    return "ffmpeg", "not found", "[yellow]WARN[/yellow]"


def _os_check() -> Check:
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, "[green]OK[/green]"


def _runner_version_check() -> Check:
    return "ytdl-runner", __version__, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _print_plain_table(checks: list[Check]) -> None:
    print("\nytdl-runner doctor", file=sys.stderr)
    print("=" * 60, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<36} {'Status':<8}", file=sys.stderr)
    print("-" * 60, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<36} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


def _print_rich_table(checks: list[Check]) -> None:
    from rich.table import Table

    table = Table(
        title="ytdl-runner doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()


def _rich_available() -> bool:
    try:
        import rich.table  # noqa: F401
    except ModuleNotFoundError:
        return False
    return True


def _emit(rich_text: str, plain_text: str, *, rich: bool) -> None:
    if rich:
        console.print(rich_text)
    else:
        print(plain_text, file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(ytdlp_command: str = "yt-dlp") -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if any check reports FAIL.
    """
    checks = [
        _runner_version_check(),
        _python_version_check(),
        _ytdlp_check(ytdlp_command),
        _ffmpeg_check(),
        _os_check(),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)
    rich = _rich_available()

    if rich:
        _print_rich_table(checks)
    else:
        _print_plain_table(checks)

    for tool in (detect_ytdlp(ytdlp_command), detect_ffmpeg()):
        if tool.found or not tool.install_commands:
            continue
        _emit(
            f"[yellow]{tool.name} is not installed.[/yellow]",
            f"{tool.name} is not installed.",
            rich=rich,
        )
        _emit("Install using one of the following commands:", "Install using one of the following commands:", rich=rich)
        for cmd in tool.install_commands:
            _emit(f"  [bold]{cmd}[/bold]", f"  {cmd}", rich=rich)

    if has_failure:
        _emit("[bold red]Some checks failed.[/bold red]", "Some checks failed.", rich=rich)
        return exit_codes.GENERAL_ERROR

    _emit("[bold green]All checks passed.[/bold green]", "All checks passed.", rich=rich)
    return exit_codes.SUCCESS
