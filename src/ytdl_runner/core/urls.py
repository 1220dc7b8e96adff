"""URL checks used before any process is spawned.

Pure string inspection via :mod:`urllib.parse`, no network access.
"""

from __future__ import annotations

from urllib.parse import urlparse

from ytdl_runner.exceptions import InvalidURLError

_YOUTUBE_HOSTS: tuple[str, ...] = ("youtube.com", "youtu.be")


def validate_url(url: str) -> bool:
    """Return ``True`` when *url* is an absolute URL with scheme and host."""
    try:
        parsed = urlparse(url.strip())
    except (AttributeError, ValueError):
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def is_youtube_url(url: str) -> bool:
    """Return ``True`` when the hostname belongs to YouTube."""
    if not validate_url(url):
        return False
    hostname = urlparse(url.strip()).hostname or ""
    return any(host in hostname for host in _YOUTUBE_HOSTS)


def require_url(url: str) -> str:
    """Return the stripped *url* or raise :class:`InvalidURLError`."""
    stripped = url.strip()
    if not stripped:
        raise InvalidURLError("URL must not be empty.")
    if not validate_url(stripped):
        raise InvalidURLError(
            f"Invalid URL: {stripped}",
            hint="Pass a full URL, e.g. https://www.youtube.com/watch?v=...",
        )
    return stripped
