"""ytdl-runner: thin automation layer around the yt-dlp executable.

Validates URLs, builds argument lists, runs yt-dlp as a child process
with streamed output capture, and locates the files it writes.
"""

from ytdl_runner.version import __version__

__all__: list[str] = ["__version__"]
