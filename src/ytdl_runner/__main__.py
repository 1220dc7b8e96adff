"""Allow ``python -m ytdl_runner`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m ytdl_runner`` behaves identically to the ``ytdl-runner``
console script.
"""

from __future__ import annotations

from ytdl_runner.cli.app import cli

if __name__ == "__main__":
    cli()
