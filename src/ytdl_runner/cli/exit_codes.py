"""Process exit codes returned by the ``ytdl-runner`` console script.

Every exit path in :mod:`ytdl_runner.cli.app` returns one of these, so
shell scripts wrapping ytdl-runner can branch on them reliably.
"""

from __future__ import annotations

SUCCESS: int = 0
"""The command finished and produced its output."""

GENERAL_ERROR: int = 1
"""A YtdlRunnerError was rendered (bad URL, missing file, bad config)."""

UNEXPECTED_ERROR: int = 2
"""An exception outside the ytdl-runner hierarchy reached the boundary."""

TOOL_FAILED: int = 3
"""yt-dlp could not be started or exited with a non-zero status."""

KEYBOARD_INTERRUPT: int = 130
"""Interrupted with Ctrl+C (128 + SIGINT)."""
