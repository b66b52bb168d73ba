"""Environment token resolver."""

from __future__ import annotations

import os

from todosync.auth.base import TokenResolver
from todosync.contracts.exceptions import AuthenticationError

TOKEN_ENV_VAR = "NOTION_TOKEN"


class EnvTokenResolver(TokenResolver):
    def __init__(self, variable: str = TOKEN_ENV_VAR) -> None:
        self._variable = variable

    async def resolve(self) -> str:
        token = (os.getenv(self._variable) or "").strip()
        if not token:
            raise AuthenticationError(f"{self._variable} is not set or empty")
        return token
