"""Infrastructure: run an external executable and capture its output.

This module is the **only** place in the codebase that spawns child
processes.  A launch-time ``OSError`` is caught here and re-raised as
:class:`~ytdl_runner.exceptions.LaunchFailureError`; a non-zero exit
status becomes :class:`~ytdl_runner.exceptions.NonZeroExitError`.

Behaviour
---------
* Arguments go straight to :func:`asyncio.create_subprocess_exec`, with no
  shell and no string concatenation.
* stdin is ``DEVNULL``; stdout and stderr are pumped concurrently,
  chunk by chunk, into the invocation buffers and the output sink.
* The successful result is stdout followed by stderr.
* If the sink raises while output is being pumped, the child is killed
  and reaped, and the sink's exception propagates unchanged.
* No timeout, no cancellation, no retry, no size cap.  Callers that
  need a deadline wrap :meth:`ProcessRunner.run` in
  :func:`asyncio.wait_for`.
"""

from __future__ import annotations

import asyncio
import codecs
from collections.abc import Callable, Sequence

from ytdl_runner.core.models import ProcessInvocation
from ytdl_runner.core.protocols import OutputSink
from ytdl_runner.exceptions import LaunchFailureError, NonZeroExitError
from ytdl_runner.infra.output_sinks import LoggingOutputSink

_DEFAULT_CHUNK_SIZE: int = 4096


class ProcessRunner:
    """Run one external program per call and return its combined output.

    Parameters
    ----------
    sink:
        Receives the command line, every output chunk and the exit
        code.  Defaults to :class:`LoggingOutputSink`.
    chunk_size:
        Maximum number of bytes read from a pipe per event.
    encoding:
        Codec used to decode both streams; undecodable bytes are
        replaced rather than raising.

    Each :meth:`run` call owns its own :class:`ProcessInvocation` and
    child process, so concurrent calls on one runner do not interact.
    """

    def __init__(
        self,
        sink: OutputSink | None = None,
        *,
        chunk_size: int = _DEFAULT_CHUNK_SIZE,
        encoding: str = "utf-8",
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        try:
            codecs.lookup(encoding)
        except LookupError as exc:
            raise ValueError(f"unknown encoding: {encoding!r}") from exc
        self._sink: OutputSink = sink if sink is not None else LoggingOutputSink()
        self._chunk_size: int = chunk_size
        self._encoding: str = encoding

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(self, command: str, arguments: Sequence[str] = ()) -> str:
        """Run *command* with *arguments* to completion.

        Returns
        -------
        str
            Everything written to stdout followed by everything written
            to stderr.

        Raises
        ------
        ValueError
            If *command* is empty.
        LaunchFailureError
            When the operating system cannot start the process.
        NonZeroExitError
            When the process exits with a non-zero status.
        """
        if not command:
            raise ValueError("command must be a non-empty executable name or path")

        invocation = ProcessInvocation(command=command, arguments=tuple(arguments))
        self._sink.command_started(command, invocation.arguments)

        try:
            process = await asyncio.create_subprocess_exec(
                command,
                *invocation.arguments,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            reason = exc.strerror or str(exc) or type(exc).__name__
            invocation.finalize_launch_error(reason)
            raise LaunchFailureError(
                command,
                reason,
                hint=_launch_hint(command, exc),
            ) from exc

        assert process.stdout is not None
        assert process.stderr is not None

        pumps = [
            asyncio.ensure_future(
                self._pump(process.stdout, invocation.append_stdout, self._sink.stdout_chunk)
            ),
            asyncio.ensure_future(
                self._pump(process.stderr, invocation.append_stderr, self._sink.stderr_chunk)
            ),
        ]
        try:
            await asyncio.gather(*pumps)
        except Exception:
            # A failing sink must not leave the child running or unreaped.
            invocation.finalize_exit(await _abandon(process, pumps))
            raise
        code = await process.wait()

        invocation.finalize_exit(code)
        self._sink.process_exited(code)

        if code != 0:
            raise NonZeroExitError(
                code,
                invocation.combined_output,
                invocation=invocation,
            )
        return invocation.combined_output

    def run_sync(self, command: str, arguments: Sequence[str] = ()) -> str:
        """Blocking wrapper around :meth:`run` for code without a loop.

        Must not be called from inside a running event loop.
        """
        return asyncio.run(self.run(command, arguments))

    # ------------------------------------------------------------------
    # Stream pumping
    # ------------------------------------------------------------------

    async def _pump(
        self,
        stream: asyncio.StreamReader,
        append: Callable[[str], None],
        forward: Callable[[str], None],
    ) -> None:
        """Read *stream* until EOF, delivering each decoded chunk."""
        decoder = codecs.getincrementaldecoder(self._encoding)(errors="replace")
        while True:
            data = await stream.read(self._chunk_size)
            if not data:
                break
            text = decoder.decode(data)
            if text:
                append(text)
                forward(text)

        # Flush a trailing partial multi-byte sequence, if any.
        tail = decoder.decode(b"", final=True)
        if tail:
            append(tail)
            forward(tail)


def _launch_hint(command: str, exc: OSError) -> str | None:
    """Return actionable guidance for common launch failures."""
    if isinstance(exc, FileNotFoundError):
        return f"Check that '{command}' is installed and on your PATH."
    if isinstance(exc, PermissionError):
        return f"Check that '{command}' is executable by the current user."
    return None


async def _abandon(
    process: asyncio.subprocess.Process,
    pumps: list[asyncio.Future[None]],
) -> int:
    """Kill *process*, drain its pipes and return its exit status."""
    for pump in pumps:
        pump.cancel()
    await asyncio.gather(*pumps, return_exceptions=True)

    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass

    for stream in (process.stdout, process.stderr):
        if stream is not None:
            await stream.read()
    return await process.wait()
