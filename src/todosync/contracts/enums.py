"""Enumerated types used across todosync."""

from __future__ import annotations

from enum import StrEnum


class MarkerKind(StrEnum):
    """Tag category of a marker."""

    TODO = "TODO"
    FIXME = "FIXME"
    BUG = "BUG"
    HACK = "HACK"
    XXX = "XXX"

    @classmethod
    def parse(cls, value: str | None) -> MarkerKind:
        """Return the kind named by *value*, falling back to ``TODO``."""
        try:
            return cls((value or "").strip().upper())
        except ValueError:
            return cls.TODO


class OperationKind(StrEnum):
    """Classification produced by reconciliation."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    NOOP = "noop"
    LOCAL_UPDATE = "local-update"
    LOCAL_DELETE = "local-delete"
