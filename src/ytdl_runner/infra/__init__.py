"""Infrastructure layer: external system integration.

This layer wraps all interaction with child processes, the filesystem,
and PATH lookups.  Every raw ``OSError`` must be caught here and
re-raised as a :class:`~ytdl_runner.exceptions.YtdlRunnerError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from ytdl_runner.infra.executable_detector import (
    ExecutableStatus,
    detect_executable,
    detect_ffmpeg,
    detect_ytdlp,
    require_executable,
)
from ytdl_runner.infra.output_sinks import LoggingOutputSink, NullOutputSink
from ytdl_runner.infra.process_runner import ProcessRunner
from ytdl_runner.infra.workspace import LocalWorkspace, safe_cleanup

__all__: list[str] = [
    "ExecutableStatus",
    "LocalWorkspace",
    "LoggingOutputSink",
    "NullOutputSink",
    "ProcessRunner",
    "detect_executable",
    "detect_ffmpeg",
    "detect_ytdlp",
    "require_executable",
    "safe_cleanup",
]
