"""User-facing notifications.

Notifications are non-blocking: the engine never waits on the user and never
lets a reported error reach the host process.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class Notifier(ABC):
    @abstractmethod
    def info(self, message: str) -> None: ...  # pragma: no cover

    @abstractmethod
    def warning(self, message: str) -> None: ...  # pragma: no cover

    @abstractmethod
    def error(self, message: str) -> None: ...  # pragma: no cover


class LoggingNotifier(Notifier):
    """Routes notifications to the ``todosync`` logger."""

    def info(self, message: str) -> None:
        logger.info(message)

    def warning(self, message: str) -> None:
        logger.warning(message)

    def error(self, message: str) -> None:
        logger.error(message)
