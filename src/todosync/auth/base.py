"""Notion integration token sources."""

from __future__ import annotations

from abc import ABC, abstractmethod


class TokenResolver(ABC):
    @abstractmethod
    async def resolve(self) -> str:
        """Return the integration token.

        Raises:
            AuthenticationError: If no usable token is available.
        """
