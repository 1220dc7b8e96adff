"""Output sinks satisfying :class:`~ytdl_runner.core.protocols.OutputSink`.

The library layers never print.  Process output is routed either into
stdlib :mod:`logging` (the default, silent unless the host application
configures handlers) or discarded.  The CLI layer provides its own
Rich-backed sink.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Sequence

PROCESS_LOGGER_NAME = "ytdl_runner.process"


class LoggingOutputSink:
    """Forward process output to a :class:`logging.Logger`.

    stdout chunks are logged at ``INFO``, stderr chunks at ``WARNING``.
    Trailing newlines are stripped so that each record reads cleanly.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger: logging.Logger = (
            logger if logger is not None else logging.getLogger(PROCESS_LOGGER_NAME)
        )

    def command_started(self, command: str, arguments: Sequence[str]) -> None:
        self._logger.info("Executing: %s", shlex.join([command, *arguments]))

    def stdout_chunk(self, chunk: str) -> None:
        self._logger.info("%s", chunk.rstrip("\r\n"))

    def stderr_chunk(self, chunk: str) -> None:
        self._logger.warning("%s", chunk.rstrip("\r\n"))

    def process_exited(self, code: int) -> None:
        self._logger.info("Process exited with code: %d", code)


class NullOutputSink:
    """Discard all process output."""

    def command_started(self, command: str, arguments: Sequence[str]) -> None:
        return None

    def stdout_chunk(self, chunk: str) -> None:
        return None

    def stderr_chunk(self, chunk: str) -> None:
        return None

    def process_exited(self, code: int) -> None:
        return None
