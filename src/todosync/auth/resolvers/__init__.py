"""Concrete token resolvers."""

from todosync.auth.resolvers.env import EnvTokenResolver
from todosync.auth.resolvers.static import StaticTokenResolver

__all__ = ["EnvTokenResolver", "StaticTokenResolver"]
