"""CLI application entry point and command routing for ytdl-runner.

This module is the **sole error boundary** for the entire application.
It catches :class:`~ytdl_runner.exceptions.YtdlRunnerError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here, all work is delegated to the core
  services and infrastructure adapters.
* Heavy or optional imports happen inside the handlers so that
  ``--help`` and ``--version`` work without Rich or questionary.
* This module is the only place that translates between the domain
  world and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys
import tempfile
from pathlib import Path

from ytdl_runner.cli import exit_codes
from ytdl_runner.cli.console import console, escape_markup, result_console
from ytdl_runner.config import RunnerConfig
from ytdl_runner.core.models import RESOLUTIONS
from ytdl_runner.exceptions import DownloadFailedError, ExecutionError, YtdlRunnerError
from ytdl_runner.version import __version__


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Commands:
    * ``ytdl-runner download <url>``    download one video via yt-dlp
    * ``ytdl-runner transcript <url>``  print subtitles as plain text
    * ``ytdl-runner doctor``            environment diagnostics
    * ``ytdl-runner --version``
    """
    parser = argparse.ArgumentParser(
        prog="ytdl-runner",
        description="Run yt-dlp with streamed output and locate what it wrote.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="command")

    download = subparsers.add_parser("download", help="Download a single video.")
    download.add_argument("url", help="Video page URL.")
    download.add_argument(
        "-r",
        "--resolution",
        choices=RESOLUTIONS,
        default=None,
        help="Resolution preset (prompted interactively when omitted).",
    )
    download.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the downloaded file.",
    )
    download.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Show only the progress bar, not yt-dlp's log lines.",
    )

    transcript = subparsers.add_parser(
        "transcript",
        help="Print a video's subtitles as plain text.",
    )
    transcript.add_argument("url", help="Video page URL.")
    transcript.add_argument("-l", "--lang", default=None, help="Subtitle language code.")
    transcript.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=None,
        help="Keep the subtitle file in this directory instead of a temp dir.",
    )
    transcript.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Echo yt-dlp's log lines.",
    )

    subparsers.add_parser("doctor", help="Check the runtime environment.")
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_download(args: argparse.Namespace, config: RunnerConfig) -> int:
    """Dispatch a single-video download.

    Flow:
    1. Fail fast when the yt-dlp executable is not on PATH.
    2. Pick the resolution (flag, prompt on a TTY, or configured default).
    3. Wire the process runner to a Rich progress sink.
    4. Download and report where the file landed.
    """
    from ytdl_runner.cli.progress import RichProgressSink
    from ytdl_runner.core.download_service import DownloadService
    from ytdl_runner.infra.executable_detector import require_executable
    from ytdl_runner.infra.process_runner import ProcessRunner
    from ytdl_runner.infra.workspace import LocalWorkspace

    require_executable(config.ytdlp_command)

    resolution: str | None = args.resolution
    if resolution is None:
        if sys.stdin.isatty():
            from ytdl_runner.cli.resolution_prompt import prompt_resolution

            resolution = prompt_resolution(args.url, config.default_resolution)
        else:
            resolution = config.default_resolution

    output_dir: Path = args.output_dir or config.downloads_dir

    console.print(
        f"\n[bold green]Starting download…[/bold green]  resolution={resolution}\n"
    )

    with RichProgressSink(echo=not args.quiet) as sink:
        service = DownloadService(
            ProcessRunner(sink),
            LocalWorkspace(),
            ytdlp_command=config.ytdlp_command,
        )
        result = service.download(args.url, output_dir, resolution)

    console.print(f"\n[bold green]{escape_markup(result.describe())}[/bold green]")
    if not result.matched_marker:
        console.print(
            "[yellow]Warning:[/yellow] the file was matched by extension only; "
            "verify it is the one you requested."
        )
    return exit_codes.SUCCESS


def _handle_transcript(args: argparse.Namespace, config: RunnerConfig) -> int:
    """Dispatch a transcript fetch and print the text to stdout."""
    from ytdl_runner.cli.progress import RichProgressSink
    from ytdl_runner.core.transcript_service import TranscriptService
    from ytdl_runner.infra.executable_detector import require_executable
    from ytdl_runner.infra.process_runner import ProcessRunner
    from ytdl_runner.infra.workspace import LocalWorkspace, safe_cleanup

    require_executable(config.ytdlp_command)

    language: str = args.lang or config.subtitle_language
    keep_files = args.output_dir is not None
    work_dir: Path = args.output_dir or Path(tempfile.mkdtemp(prefix="ytdl-runner-"))

    try:
        with RichProgressSink(echo=args.verbose) as sink:
            service = TranscriptService(
                ProcessRunner(sink),
                LocalWorkspace(),
                ytdlp_command=config.ytdlp_command,
            )
            result = service.fetch_transcript(args.url, work_dir, language)
    finally:
        if not keep_files and not safe_cleanup(work_dir):
            console.print(f"[yellow]Warning:[/yellow] could not remove {work_dir}")

    result_console.print(result.text, markup=False, highlight=False, soft_wrap=True)
    return exit_codes.SUCCESS


def _handle_doctor(config: RunnerConfig) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from ytdl_runner.cli.doctor import run_doctor

    return run_doctor(config.ytdlp_command)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the ytdl-runner CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    config = RunnerConfig.from_env()

    if args.command == "doctor":
        return _handle_doctor(config)
    if args.command == "transcript":
        return _handle_transcript(args, config)
    return _handle_download(args, config)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def _exit_code_for(exc: YtdlRunnerError) -> int:
    if isinstance(exc, (ExecutionError, DownloadFailedError)):
        return exit_codes.TOOL_FAILED
    return exit_codes.GENERAL_ERROR


def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except YtdlRunnerError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape_markup(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape_markup(exc.hint)}")
        sys.exit(_exit_code_for(exc))
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape_markup(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
