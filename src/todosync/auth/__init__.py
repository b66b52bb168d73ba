"""Auth module public exports."""

from todosync.auth.base import TokenResolver
from todosync.auth.factory import create_token_resolver

__all__ = ["TokenResolver", "create_token_resolver"]
