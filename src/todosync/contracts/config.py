"""Configuration contracts."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, model_validator


class FieldConfig(BaseModel):
    """Names of the remote store properties each marker field maps to."""

    title: str = "Name"
    kind: str = "Type"
    status: str = "Status"
    file_path: str = "File Path"
    line_number: str = "Line Number"
    marker_id: str = "TODO_ID"


class TodoSyncConfig(BaseModel):
    provider: str = "notion"
    database_id: str = ""
    auth: str = "env"
    token: str | None = None
    field_config: FieldConfig = Field(default_factory=FieldConfig)
    comment_leaders: list[str] = Field(default_factory=lambda: ["//", "#"])
    max_markers_per_file: int = Field(default=50, ge=1, le=1000)
    default_status: str = "Not started"
    archived_status: str = "Archived"
    cache_path: Path | None = None
    max_retries: int = Field(default=3, ge=0, le=10)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_auth_token(self) -> TodoSyncConfig:
        if self.auth not in {"env", "token"}:
            raise ValueError("auth must be one of: env, token")
        if self.auth != "token" and (self.token or "").strip():
            raise ValueError("token must be unset when auth is not 'token'")
        return self

    @model_validator(mode="after")
    def validate_comment_leaders(self) -> TodoSyncConfig:
        if not self.comment_leaders or any(not leader.strip() for leader in self.comment_leaders):
            raise ValueError("comment_leaders must contain at least one non-blank leader")
        return self
