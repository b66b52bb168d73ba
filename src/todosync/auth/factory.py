"""Token resolver factory."""

from __future__ import annotations

from todosync.auth.base import TokenResolver
from todosync.auth.resolvers.env import EnvTokenResolver
from todosync.auth.resolvers.static import StaticTokenResolver
from todosync.contracts.config import TodoSyncConfig
from todosync.contracts.exceptions import ConfigError

RESOLVERS: dict[str, type[TokenResolver]] = {
    "env": EnvTokenResolver,
    "token": StaticTokenResolver,
}


def create_token_resolver(config: TodoSyncConfig) -> TokenResolver:
    auth_mode = config.auth
    if auth_mode not in RESOLVERS:
        raise ConfigError(f"Unknown auth mode: {auth_mode}")

    if auth_mode == "env":
        return EnvTokenResolver()
    return StaticTokenResolver(token=config.token or "")
