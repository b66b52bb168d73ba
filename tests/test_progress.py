"""Tests for RichSyncProgress and NullSyncProgress."""

from __future__ import annotations

import io

from rich.console import Console

from todosync.cli.progress.rich import RichSyncProgress
from todosync.contracts.exceptions import RemoteUnavailable
from todosync.engine.progress import NullSyncProgress, SyncProgress


def _console() -> Console:
    return Console(file=io.StringIO(), width=100)


class TestNullSyncProgress:
    """NullSyncProgress is a no-op implementation."""

    def test_implements_protocol(self) -> None:
        assert issubclass(NullSyncProgress, SyncProgress)

    def test_phase_lifecycle_is_noop(self) -> None:
        progress = NullSyncProgress()
        progress.phase_start("Scan", total=5)
        progress.item_done("Scan")
        progress.phase_done("Scan")
        progress.phase_error("Fetch", RemoteUnavailable("down"))


class TestRichSyncProgress:
    """RichSyncProgress drives Rich progress bars."""

    def test_implements_protocol(self) -> None:
        assert issubclass(RichSyncProgress, SyncProgress)

    def test_context_manager(self) -> None:
        progress = RichSyncProgress(_console())
        with progress as p:
            assert p is progress

    def test_determinate_phase(self) -> None:
        with RichSyncProgress(_console()) as progress:
            progress.phase_start("Push", total=3)
            for _ in range(3):
                progress.item_done("Push")
            progress.phase_done("Push")

    def test_indeterminate_phase(self) -> None:
        with RichSyncProgress(_console()) as progress:
            progress.phase_start("Fetch")
            progress.phase_done("Fetch")

    def test_unknown_phase_is_noop(self) -> None:
        with RichSyncProgress(_console()) as progress:
            progress.item_done("Unknown")
            progress.phase_done("Unknown")
            progress.phase_error("Unknown", RemoteUnavailable("down"))

    def test_restarted_phase_reuses_its_row(self) -> None:
        with RichSyncProgress(_console()) as progress:
            for total in (2, 4):
                progress.phase_start("Stamp", total=total)
                for _ in range(total):
                    progress.item_done("Stamp")
                progress.phase_done("Stamp")
            assert len(progress._progress.tasks) == 1
            assert progress._progress.tasks[0].total == 4

    def test_phase_error_marks_row(self) -> None:
        with RichSyncProgress(_console()) as progress:
            progress.phase_start("Fetch")
            progress.phase_error("Fetch", RemoteUnavailable("down"))
            assert "Fetch" in progress._progress.tasks[0].description
            assert "✗" in progress._progress.tasks[0].description
