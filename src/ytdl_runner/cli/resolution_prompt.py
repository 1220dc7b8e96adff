"""Interactive resolution selection for the CLI layer.

Renders the available presets as a Rich table and asks the user to pick
one with questionary arrow keys.  Only used when ``--resolution`` is
omitted and stdin is a terminal.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ytdl_runner.cli.console import console
from ytdl_runner.core.download_service import DownloadService
from ytdl_runner.core.models import RESOLUTIONS
from ytdl_runner.exceptions import EnvironmentError

_DESCRIPTIONS: dict[str, str] = {
    "480p": "Small file, at least 360p when available",
    "720p": "HD, good default",
    "1080p": "Full HD",
    "best": "Highest single-file quality yt-dlp offers",
}


def _import_questionary() -> Any:
    """Import questionary lazily for interactive selection."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def _import_rich_table() -> type[Any]:
    """Import rich table lazily for preset rendering."""
    try:
        from rich.table import Table
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Table


def _build_choice_label(index: int, resolution: str) -> str:
    """Build the label shown in the selector, e.g. ``"  2.  720p   HD, …"``."""
    return f"  {index + 1}.  {resolution:<6} {_DESCRIPTIONS.get(resolution, '')}"


def _display_resolution_table(url: str, resolutions: Sequence[str]) -> None:
    table_class = _import_rich_table()

    console.print()
    console.print(f"[bold cyan]URL:[/bold cyan]  {url}")
    console.print()

    table = table_class(
        title="Resolution presets",
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
    )
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("Preset", min_width=6)
    table.add_column("yt-dlp format", min_width=20)
    table.add_column("Notes")

    for i, resolution in enumerate(resolutions, start=1):
        table.add_row(
            str(i),
            resolution,
            DownloadService.build_format_spec(resolution),
            _DESCRIPTIONS.get(resolution, ""),
        )

    console.print(table)
    console.print()


def prompt_resolution(
    url: str,
    default: str,
    resolutions: Sequence[str] = RESOLUTIONS,
) -> str:
    """Display presets and ask the user to choose one.

    Returns
    -------
    str
        The chosen preset.

    Raises
    ------
    FormatSelectionError
        If the user cancels the prompt (Esc / Ctrl+C returns ``None``).
    """
    from ytdl_runner.exceptions import FormatSelectionError

    questionary = _import_questionary()

    _display_resolution_table(url, resolutions)

    choices = [
        questionary.Choice(title=_build_choice_label(i, res), value=res)
        for i, res in enumerate(resolutions)
    ]
    default_choice = next((c for c in choices if c.value == default), None)

    selected: str | None = questionary.select(
        "Select resolution:",
        choices=choices,
        default=default_choice,
        use_arrow_keys=True,
        use_shortcuts=False,
    ).ask()

    if selected is None:
        raise FormatSelectionError(
            "No resolution selected.",
            hint="Pass --resolution to skip the prompt.",
        )
    return selected
