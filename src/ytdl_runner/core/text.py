"""Pure text helpers: timestamped names and subtitle cleanup.

Every function here is deterministic given its inputs (pass *now* to pin
the clock) and free of I/O.
"""

from __future__ import annotations

import re
import secrets
from datetime import datetime, timezone

_CUE_TIMING = re.compile(
    r"^(?:\d{2}:)?\d{2}:\d{2}[.,]\d{3}\s*-->\s*(?:\d{2}:)?\d{2}:\d{2}[.,]\d{3}(?:\s+.*)?$"
)
_SEQUENCE_NUMBER = re.compile(r"^\d+$")
_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")
_VTT_HEADER_PREFIXES: tuple[str, ...] = ("WEBVTT", "Kind:", "Language:")

# Characters rejected by at least one common filesystem.
_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


# ---------------------------------------------------------------------------
# Timestamps and filenames
# ---------------------------------------------------------------------------

def formatted_timestamp(now: datetime | None = None) -> str:
    """Return a filesystem-safe UTC timestamp.

    Shape: ``2024-05-01_12-30-45-123Z``: an ISO-8601 instant with
    ``:`` and ``.`` replaced by ``-`` and ``T`` replaced by ``_``.
    Naive datetimes are taken to be UTC.
    """
    moment = now if now is not None else datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    millis = moment.microsecond // 1000
    return f"{moment:%Y-%m-%d_%H-%M-%S}-{millis:03d}Z"


def generate_random_filename(extension: str = "mp4", now: datetime | None = None) -> str:
    """Return ``<timestamp>_<8 hex chars>.<extension>``."""
    suffix = extension.lstrip(".") or "mp4"
    return f"{formatted_timestamp(now)}_{secrets.token_hex(4)}.{suffix}"


def sanitize_filename(name: str) -> str:
    """Strip characters that are invalid in filenames on common platforms."""
    cleaned = _UNSAFE_FILENAME_CHARS.sub("", name)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip().strip(".")
    return cleaned or "untitled"


# ---------------------------------------------------------------------------
# Subtitle → transcript
# ---------------------------------------------------------------------------

def _is_header_line(line: str) -> bool:
    """True for the WebVTT file header (signature and metadata lines)."""
    return line.startswith(_VTT_HEADER_PREFIXES)


def _is_comment_line(line: str) -> bool:
    """True for the first line of a WebVTT ``NOTE`` comment block."""
    return line == "NOTE" or line.startswith("NOTE ")


def clean_subtitle_to_transcript(content: str) -> str:
    """Reduce SRT or WebVTT content to a single line of spoken text.

    Drops blank lines, cue numbers, timing lines, the WebVTT header and
    ``NOTE`` lines, strips inline markup tags, skips a line identical to
    the one kept just before it (auto-captions repeat rolling lines), and
    joins the rest with single spaces.

    Header lines (``WEBVTT``, ``Kind:``, ``Language:``) are only
    recognised before the first cue timing line, and lines belonging to
    a cue payload are never taken for header or ``NOTE`` lines.
    """
    kept: list[str] = []
    in_header = True
    in_cue = False
    for raw_line in content.splitlines():
        trimmed = raw_line.strip()
        if not trimmed:
            in_cue = False
            continue
        if _CUE_TIMING.match(trimmed):
            in_header = False
            in_cue = True
            continue
        if _SEQUENCE_NUMBER.match(trimmed):
            continue
        if not in_cue and (
            _is_comment_line(trimmed) or (in_header and _is_header_line(trimmed))
        ):
            continue
        text = _TAG.sub("", trimmed).strip()
        if not text:
            continue
        if kept and kept[-1] == text:
            continue
        kept.append(text)
    return _WHITESPACE.sub(" ", " ".join(kept)).strip()
