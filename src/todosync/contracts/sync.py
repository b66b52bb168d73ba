"""Reconciliation operations and pass results."""

from __future__ import annotations

from pydantic import BaseModel, Field

from todosync.contracts.enums import OperationKind
from todosync.contracts.marker import Marker


class PushOperation(BaseModel):
    kind: OperationKind
    marker_id: str
    marker: Marker | None = None
    remote_key: str | None = None


class PullOperation(BaseModel):
    kind: OperationKind
    marker_id: str
    buffer_key: str
    line: int
    new_text: str | None = None


class ItemFailure(BaseModel):
    marker_id: str
    operation: OperationKind
    message: str


class PushResult(BaseModel):
    """Outcome of one save-triggered pass over a single buffer."""

    buffer_key: str
    created: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list)
    unchanged: int = 0
    stamped: list[str] = Field(default_factory=list)
    unstamped: list[str] = Field(default_factory=list)
    failures: list[ItemFailure] = Field(default_factory=list)
    skipped: bool = False
    aborted: str | None = None
    remote_available: bool = True
    dry_run: bool = False


class PullResult(BaseModel):
    """Outcome of one pull pass across buffers."""

    updated: list[str] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list)
    failures: list[ItemFailure] = Field(default_factory=list)
    buffers_scanned: int = 0
    aborted: str | None = None
    remote_available: bool = True
    dry_run: bool = False
