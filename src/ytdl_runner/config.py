"""Runtime configuration resolved from environment variables.

Recognised variables
--------------------
``YTDL_RUNNER_DOWNLOADS_DIR``
    Directory that receives downloads (default ``./downloads``).
``YTDL_RUNNER_YTDLP``
    Name or path of the yt-dlp executable (default ``yt-dlp``).
``YTDL_RUNNER_RESOLUTION``
    Default resolution preset (default ``720p``).
``YTDL_RUNNER_SUB_LANG``
    Default subtitle language (default ``en``).

CLI flags always take precedence over these values.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from ytdl_runner.core.models import DEFAULT_RESOLUTION, RESOLUTIONS
from ytdl_runner.exceptions import EnvironmentCheckError

ENV_DOWNLOADS_DIR = "YTDL_RUNNER_DOWNLOADS_DIR"
ENV_YTDLP = "YTDL_RUNNER_YTDLP"
ENV_RESOLUTION = "YTDL_RUNNER_RESOLUTION"
ENV_SUB_LANG = "YTDL_RUNNER_SUB_LANG"


@dataclass(frozen=True, slots=True)
class RunnerConfig:
    """Immutable bundle of runtime settings."""

    downloads_dir: Path = field(default_factory=lambda: Path("downloads"))
    ytdlp_command: str = "yt-dlp"
    default_resolution: str = DEFAULT_RESOLUTION
    subtitle_language: str = "en"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RunnerConfig:
        """Build a config from *environ* (defaults to ``os.environ``).

        Raises
        ------
        EnvironmentCheckError
            If ``YTDL_RUNNER_RESOLUTION`` names an unknown preset or
            ``YTDL_RUNNER_YTDLP`` is set but blank.
        """
        env = os.environ if environ is None else environ

        resolution = env.get(ENV_RESOLUTION, DEFAULT_RESOLUTION).strip().lower()
        if resolution not in RESOLUTIONS:
            raise EnvironmentCheckError(
                f"Unsupported {ENV_RESOLUTION} value: {resolution!r}",
                hint=f"Use one of: {', '.join(RESOLUTIONS)}",
            )

        ytdlp_command = env.get(ENV_YTDLP, "yt-dlp").strip()
        if not ytdlp_command:
            raise EnvironmentCheckError(f"{ENV_YTDLP} must not be empty.")

        return cls(
            downloads_dir=Path(env.get(ENV_DOWNLOADS_DIR, "downloads")).expanduser(),
            ytdlp_command=ytdlp_command,
            default_resolution=resolution,
            subtitle_language=env.get(ENV_SUB_LANG, "en").strip() or "en",
        )
