"""Tests for the Rich progress sink (cli/progress.py).

The sink is driven with synthetic yt-dlp output; Rich renders to a
non-terminal stderr, so nothing is drawn interactively.
"""

from __future__ import annotations

import importlib.util

import pytest

from ytdl_runner.cli.progress import _safe_float

requires_rich = pytest.mark.skipif(
    importlib.util.find_spec("rich") is None,
    reason="rich not installed",
)


def _completed(sink: object) -> float:
    progress = sink._progress  # type: ignore[attr-defined]
    task_id = sink._task_id  # type: ignore[attr-defined]
    return progress.tasks[task_id].completed if task_id is not None else -1.0


@requires_rich
class TestRichProgressSink:
    def test_percent_line_updates_task(self) -> None:
        from ytdl_runner.cli.progress import RichProgressSink

        with RichProgressSink(echo=False) as sink:
            sink.stdout_chunk("[download]  42.5% of 10.00MiB at 1.00MiB/s ETA 00:05\n")
            assert _completed(sink) == pytest.approx(42.5)

    def test_line_split_across_chunks(self) -> None:
        from ytdl_runner.cli.progress import RichProgressSink

        with RichProgressSink(echo=False) as sink:
            sink.stdout_chunk("[download]  1")
            assert sink._task_id is None
            sink.stdout_chunk("7.0% of 5MiB\r")
            assert _completed(sink) == pytest.approx(17.0)

    def test_carriage_return_redraws(self) -> None:
        from ytdl_runner.cli.progress import RichProgressSink

        with RichProgressSink(echo=False) as sink:
            sink.stdout_chunk("[download]  10.0% of 5MiB\r[download]  55.0% of 5MiB\r")
            assert _completed(sink) == pytest.approx(55.0)

    def test_destination_names_task(self) -> None:
        from ytdl_runner.cli.progress import RichProgressSink

        with RichProgressSink(echo=False) as sink:
            sink.stdout_chunk("[download] Destination: downloads/video_x.mp4\n")
            task = sink._progress.tasks[sink._task_id]
            assert task.description == "video_x.mp4"

    def test_successful_exit_completes_task(self) -> None:
        from ytdl_runner.cli.progress import RichProgressSink

        with RichProgressSink(echo=False) as sink:
            sink.stdout_chunk("[download]  30.0% of 5MiB\n")
            sink.process_exited(0)
            assert _completed(sink) == pytest.approx(100.0)

    def test_failed_exit_leaves_progress(self) -> None:
        from ytdl_runner.cli.progress import RichProgressSink

        with RichProgressSink(echo=False) as sink:
            sink.stdout_chunk("[download]  30.0% of 5MiB\n")
            sink.process_exited(1)
            assert _completed(sink) == pytest.approx(30.0)

    def test_markup_like_output_echoed_safely(self) -> None:
        from ytdl_runner.cli.progress import RichProgressSink

        with RichProgressSink(echo=True) as sink:
            sink.command_started("yt-dlp", ["--verbose", "[bold]"])
            sink.stderr_chunk("[debug] Command-line config: ['--verbose']\n")
            sink.stderr_chunk("[/unbalanced]\n")

    def test_not_started_ignores_output(self) -> None:
        from ytdl_runner.cli.progress import RichProgressSink

        sink = RichProgressSink()
        sink.stdout_chunk("[download]  50.0% of 5MiB\n")
        sink.process_exited(0)
        assert sink._task_id is None

    def test_stop_flushes_partial_line_and_is_idempotent(self) -> None:
        from ytdl_runner.cli.progress import RichProgressSink

        sink = RichProgressSink(echo=False)
        sink.start()
        sink.stdout_chunk("[download]  64.0% of 5MiB")
        sink.stop()
        sink.stop()
        assert sink._progress.tasks[sink._task_id].completed == pytest.approx(64.0)
        assert not sink._started


class TestSafeFloat:
    def test_none(self) -> None:
        assert _safe_float(None) is None

    def test_string_number(self) -> None:
        assert _safe_float("42.5") == 42.5

    def test_int(self) -> None:
        assert _safe_float(7) == 7.0

    def test_bool_rejected(self) -> None:
        assert _safe_float(True) is None

    def test_bad_string(self) -> None:
        assert _safe_float("n/a") is None
