"""Custom exception hierarchy for ytdl-runner.

All exceptions that cross layer boundaries must inherit from
:class:`YtdlRunnerError`.  Raw ``OSError`` instances raised while
spawning processes or touching the filesystem must NEVER propagate
beyond the infrastructure layer, they are caught there and re-raised
as a typed subclass defined here.

Hierarchy
---------
YtdlRunnerError
├── InvalidURLError
├── ExecutionError
│   ├── LaunchFailureError
│   └── NonZeroExitError
├── FormatSelectionError
├── DownloadFailedError
├── OutputNotFoundError
├── SubtitlesNotFoundError
├── ExecutableNotFoundError
└── EnvironmentError
    └── EnvironmentCheckError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ytdl_runner.core.models import ProcessInvocation


class YtdlRunnerError(Exception):
    """Base exception for all ytdl-runner errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- URL validation --------------------------------------------------------

class InvalidURLError(YtdlRunnerError):
    """Raised when the provided URL fails validation."""


# --- Process execution -----------------------------------------------------

class ExecutionError(YtdlRunnerError):
    """Base for the two terminal failure outcomes of a process run."""


class LaunchFailureError(ExecutionError):
    """Raised when the operating system cannot start the process at all.

    No exit code exists for this outcome; :attr:`reason` carries the
    underlying OS error message.
    """

    def __init__(self, command: str, reason: str, *, hint: str | None = None) -> None:
        super().__init__(f"Failed to start process '{command}': {reason}", hint=hint)
        self.command: str = command
        self.reason: str = reason


class NonZeroExitError(ExecutionError):
    """Raised when the process ran but terminated with a non-zero status."""

    def __init__(
        self,
        code: int,
        combined_output: str,
        *,
        invocation: ProcessInvocation | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(
            f"Command failed with exit code {code}:\n{combined_output}",
            hint=hint,
        )
        self.code: int = code
        self.combined_output: str = combined_output
        self.invocation: ProcessInvocation | None = invocation


# --- Format handling -------------------------------------------------------

class FormatSelectionError(YtdlRunnerError):
    """Raised when no suitable format string can be determined."""


# --- Download / output discovery -------------------------------------------

class DownloadFailedError(YtdlRunnerError):
    """Raised when the download process terminates with an error."""


class OutputNotFoundError(YtdlRunnerError):
    """Raised when no output file can be located after a successful run."""


class SubtitlesNotFoundError(YtdlRunnerError):
    """Raised when yt-dlp produced no subtitle file for the video."""


# --- Environment / tooling -------------------------------------------------

class ExecutableNotFoundError(YtdlRunnerError):
    """Raised when a required executable cannot be located on PATH."""


class EnvironmentError(YtdlRunnerError):
    """Raised when a required runtime dependency is not available."""


class EnvironmentCheckError(EnvironmentError):
    """Raised when a required environment precondition is not met."""


def append_ytdlp_upgrade_suggestion(hint: str) -> str:
    """Append yt-dlp upgrade guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.
    """
    marker = "Also try updating yt-dlp:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            marker,
            "    pip install --upgrade yt-dlp",
        )
    )
