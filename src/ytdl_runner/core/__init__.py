"""Core / service layer: pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem or process I/O, both arrive through protocols.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from ytdl_runner.core.download_service import DownloadService
from ytdl_runner.core.models import DownloadResult, ProcessInvocation, TranscriptResult
from ytdl_runner.core.protocols import CommandRunner, OutputSink, Workspace
from ytdl_runner.core.transcript_service import TranscriptService

__all__: list[str] = [
    "CommandRunner",
    "DownloadResult",
    "DownloadService",
    "OutputSink",
    "ProcessInvocation",
    "TranscriptResult",
    "TranscriptService",
    "Workspace",
]
