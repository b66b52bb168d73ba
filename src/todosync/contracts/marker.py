"""Marker contracts."""

from __future__ import annotations

from pydantic import BaseModel

from todosync.contracts.enums import MarkerKind
from todosync.contracts.record import RecordFields


class Marker(BaseModel):
    """A single-line source annotation extracted from a buffer.

    ``status`` is ``None`` unless the local side explicitly asserts one; the
    remote store owns status transitions after creation.
    """

    id: str | None = None
    text: str
    kind: MarkerKind = MarkerKind.TODO
    status: str | None = None
    path: str
    line: int

    @property
    def line_number(self) -> int:
        return self.line + 1

    @property
    def is_assigned(self) -> bool:
        return bool(self.id)

    def to_fields(self, default_status: str | None = None) -> RecordFields:
        return RecordFields(
            marker_id=self.id or "",
            text=self.text,
            kind=self.kind,
            status=self.status if self.status is not None else default_status,
            file_path=self.path,
            line_number=self.line_number,
        )
