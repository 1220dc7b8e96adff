"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols, never on concrete
implementations, preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol


class OutputSink(Protocol):
    """Observability side channel for a running process.

    Every chunk is delivered as soon as it is read, so partial output is
    visible before the process completes.  Sinks must not raise.
    """

    def command_started(self, command: str, arguments: Sequence[str]) -> None:
        """Announce the command about to run."""
        ...  # pragma: no cover

    def stdout_chunk(self, chunk: str) -> None:
        """Receive a decoded chunk of standard output."""
        ...  # pragma: no cover

    def stderr_chunk(self, chunk: str) -> None:
        """Receive a decoded chunk of standard error."""
        ...  # pragma: no cover

    def process_exited(self, code: int) -> None:
        """Announce the final exit status."""
        ...  # pragma: no cover


class CommandRunner(Protocol):
    """Contract for running an external executable to completion."""

    def run_sync(self, command: str, arguments: Sequence[str]) -> str:
        """Run *command* with *arguments* and return the combined output.

        Raises
        ------
        LaunchFailureError
            When the process cannot be started.
        NonZeroExitError
            When the process exits with a non-zero status.
        """
        ...  # pragma: no cover


class Workspace(Protocol):
    """Contract for the filesystem operations the services need."""

    def ensure_directory(self, directory: Path) -> None:
        """Create *directory* (and parents) when missing."""
        ...  # pragma: no cover

    def locate_output(
        self,
        directory: Path,
        marker: str,
        extensions: Sequence[str],
    ) -> tuple[Path, bool]:
        """Find the file a run produced.

        Returns the path and whether it was matched by *marker* (as
        opposed to the extension fallback).

        Raises
        ------
        OutputNotFoundError
            When nothing suitable exists in *directory*.
        """
        ...  # pragma: no cover

    def file_size(self, path: Path) -> int:
        ...  # pragma: no cover

    def read_text(self, path: Path) -> str:
        ...  # pragma: no cover
