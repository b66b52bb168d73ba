"""File-backed text buffer."""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path

from todosync.contracts.buffer import TextBuffer
from todosync.contracts.exceptions import BufferWriteRejected, ConfigError

logger = logging.getLogger(__name__)

# Only real line breaks; str.splitlines also breaks on form feeds and Unicode separators.
_LINE_BREAK_RE = re.compile(r"\r\n|\n|\r")


class FileBuffer(TextBuffer):
    """A source file edited in memory and written back on :meth:`save`.

    The file's newline style and trailing newline are kept. Saves go through a
    temporary file in the same directory and an atomic rename.
    """

    def __init__(self, path: Path, content: str, *, display_path: str | None = None) -> None:
        self._file = path
        self._display_path = display_path or str(path)
        self._newline = "\r\n" if "\r\n" in content else "\n"
        self._trailing_newline = content.endswith(("\n", "\r"))
        self._lines = _LINE_BREAK_RE.split(content) if content else []
        if self._trailing_newline:
            self._lines.pop()

    @classmethod
    def open(cls, path: Path, *, display_path: str | None = None) -> FileBuffer:
        try:
            with path.open(encoding="utf-8", newline="") as handle:
                content = handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"cannot read source file: {path}") from exc
        return cls(path, content, display_path=display_path)

    @property
    def key(self) -> str:
        return str(self._file.resolve())

    @property
    def path(self) -> str:
        return self._display_path

    async def read_lines(self) -> list[str]:
        return list(self._lines)

    async def replace_line(self, index: int, text: str) -> None:
        self._check_index(index)
        if "\n" in text or "\r" in text:
            raise BufferWriteRejected("replacement must be a single line", buffer_key=self.key, line=index)
        self._lines[index] = text

    async def delete_line(self, index: int) -> None:
        self._check_index(index)
        del self._lines[index]

    async def save(self) -> bool:
        if self._file.exists() and not os.access(self._file, os.W_OK):
            logger.warning("%s is read-only; not saving", self._file)
            return False

        content = self._newline.join(self._lines)
        if self._trailing_newline and self._lines:
            content += self._newline
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self._file.parent, prefix=f".{self._file.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                    handle.write(content)
                if self._file.exists():
                    os.chmod(tmp_name, self._file.stat().st_mode)
                os.replace(tmp_name, self._file)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            logger.warning("Failed to save %s: %s", self._file, exc)
            return False
        logger.debug("Saved %s", self._file)
        return True

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._lines):
            raise BufferWriteRejected(
                f"line {index + 1} is outside {self._display_path}", buffer_key=self.key, line=index
            )
