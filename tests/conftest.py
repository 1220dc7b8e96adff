"""Shared pytest fixtures and configuration for the ytdl-runner test suite.

Guidelines
----------
* No internet access in any test.
* yt-dlp is never spawned; process tests run ``sys.executable -c ...``.
* Core tests mock the runner and use ``tmp_path`` workspaces.
* Tests must not depend on OS state beyond a working Python interpreter.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest


class RecordingSink:
    """OutputSink that records every event in arrival order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def command_started(self, command: str, arguments: Sequence[str]) -> None:
        self.events.append(("command", (command, tuple(arguments))))

    def stdout_chunk(self, chunk: str) -> None:
        self.events.append(("stdout", chunk))

    def stderr_chunk(self, chunk: str) -> None:
        self.events.append(("stderr", chunk))

    def process_exited(self, code: int) -> None:
        self.events.append(("exit", code))

    def text(self, stream: str) -> str:
        return "".join(value for kind, value in self.events if kind == stream)

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.events]


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def python_script() -> Callable[[str], tuple[str, list[str]]]:
    """Return ``(command, arguments)`` running *source* under this interpreter."""

    def _build(source: str) -> tuple[str, list[str]]:
        return sys.executable, ["-c", source]

    return _build


class WritingRunner:
    """CommandRunner double that writes files the way yt-dlp would.

    It reads the ``-o`` template from the argument list, substitutes
    ``%(ext)s`` with each requested suffix and writes *content* there.
    """

    def __init__(
        self,
        suffixes: Sequence[str] = ("mp4",),
        content: str = "x" * 2048,
        output: str = "ok",
    ) -> None:
        self.suffixes = tuple(suffixes)
        self.content = content
        self.output = output
        self.calls: list[tuple[str, list[str]]] = []

    def run_sync(self, command: str, arguments: Sequence[str]) -> str:
        self.calls.append((command, list(arguments)))
        template = arguments[list(arguments).index("-o") + 1]
        for suffix in self.suffixes:
            Path(template.replace("%(ext)s", suffix)).write_text(self.content, encoding="utf-8")
        return self.output


@pytest.fixture
def writing_runner_factory() -> Callable[..., WritingRunner]:
    return WritingRunner
