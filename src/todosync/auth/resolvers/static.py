"""Token taken verbatim from the config file (``auth: "token"``)."""

from __future__ import annotations

from dataclasses import dataclass, field

from todosync.auth.base import TokenResolver
from todosync.contracts.exceptions import AuthenticationError


@dataclass(frozen=True)
class StaticTokenResolver(TokenResolver):
    token: str = field(repr=False)

    async def resolve(self) -> str:
        resolved = self.token.strip()
        if not resolved:
            raise AuthenticationError("The config sets auth to 'token' but the token is empty")
        return resolved
