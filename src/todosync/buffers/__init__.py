"""Text buffer implementations."""

from todosync.buffers.file import FileBuffer

__all__ = ["FileBuffer"]
