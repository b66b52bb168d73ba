"""Progress events emitted by the push and pull passes.

The engine reports phases; the CLI's Rich bar is one consumer. Providers
never see these events.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum


class SyncPhase(StrEnum):
    """Phases of a pass, in the order a push runs them."""

    SCAN = "Scan"
    STAMP = "Stamp"
    FETCH = "Fetch"
    PUSH = "Push"
    PULL = "Pull"


class SyncProgress(ABC):
    """Observer for phase lifecycle events.

    A push runs Scan, Stamp, Fetch and Push once per buffer, so a phase may
    start several times in one session. A pull runs Fetch once, then Pull
    with one item per buffer.
    """

    @abstractmethod
    def phase_start(self, phase: str, total: int | None = None) -> None:
        """*phase* begins with *total* items, or an unknown count when ``None``."""
        ...  # pragma: no cover

    @abstractmethod
    def item_done(self, phase: str) -> None:
        ...  # pragma: no cover

    @abstractmethod
    def phase_done(self, phase: str) -> None:
        ...  # pragma: no cover

    @abstractmethod
    def phase_error(self, phase: str, error: BaseException) -> None:
        """*phase* stopped early; for Fetch this means the remote is unavailable."""
        ...  # pragma: no cover


class NullSyncProgress(SyncProgress):
    def phase_start(self, phase: str, total: int | None = None) -> None:
        pass

    def item_done(self, phase: str) -> None:
        pass

    def phase_done(self, phase: str) -> None:
        pass

    def phase_error(self, phase: str, error: BaseException) -> None:
        pass
