"""Text buffer contract.

A buffer is whatever holds the source text being synchronized: an editor
document, or a file on disk for the CLI. Line indices are 0-based.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class TextBuffer(ABC):
    @property
    @abstractmethod
    def key(self) -> str:
        """Stable identity of the buffer (used for caching and locking)."""

    @property
    @abstractmethod
    def path(self) -> str:
        """Path reported to the remote store as the marker location."""

    @abstractmethod
    async def read_lines(self) -> list[str]: ...  # pragma: no cover

    @abstractmethod
    async def replace_line(self, index: int, text: str) -> None:
        """Replace line *index*.

        Raises:
            BufferWriteRejected: If the edit cannot be applied.
        """

    @abstractmethod
    async def delete_line(self, index: int) -> None:
        """Remove line *index* entirely.

        Raises:
            BufferWriteRejected: If the edit cannot be applied.
        """

    @abstractmethod
    async def save(self) -> bool:
        """Persist pending edits. Returns ``False`` when the host declines."""
