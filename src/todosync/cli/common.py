"""Shared CLI helpers."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from todosync.buffers import FileBuffer
from todosync.contracts.sync import ItemFailure


def open_buffers(files: Sequence[str]) -> list[FileBuffer]:
    return [FileBuffer.open(Path(name), display_path=name) for name in files]


def format_comma_or_none(values: Sequence[str]) -> str:
    if not values:
        return "none"
    return ", ".join(values)


def format_failures(failures: Sequence[ItemFailure]) -> list[str]:
    return [f"    {failure.operation} {failure.marker_id}: {failure.message}" for failure in failures]
