"""Remote record contracts."""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from todosync.contracts.enums import MarkerKind


class RecordFields(BaseModel):
    """Semantic payload written to the remote store for one marker."""

    marker_id: str
    text: str
    kind: MarkerKind = MarkerKind.TODO
    status: str | None = None
    file_path: str
    line_number: int


class RemoteRecord(BaseModel):
    """Read-through copy of one record owned by the remote store."""

    key: str
    marker_id: str | None = None
    text: str = ""
    kind: MarkerKind = MarkerKind.TODO
    status: str = ""
    file_path: str = ""
    line_number: int | None = None
    archived: bool = False

    @field_validator("kind", mode="before")
    @classmethod
    def _parse_kind(cls, value: object) -> MarkerKind:
        if isinstance(value, MarkerKind):
            return value
        return MarkerKind.parse(value if isinstance(value, str) else None)

    def is_terminal(self, archived_status: str) -> bool:
        return self.archived or self.status == archived_status


class FieldSupport(BaseModel):
    """Which ``RecordFields`` a store persists, and how much text it keeps.

    Reconciliation compares local values as the store would hold them, so a
    field the store drops or clips does not look changed on every pass.
    """

    model_config = {"frozen": True}

    stored: frozenset[str] = frozenset({"text", "kind", "status", "file_path", "line_number"})
    text_limit: int | None = None

    def stores(self, field: str) -> bool:
        return field in self.stored

    def clip(self, value: str) -> str:
        if self.text_limit is None:
            return value
        return value[: self.text_limit]
