"""Provider implementations and factory."""

from todosync.providers.dry_run import DryRunOperation, DryRunProvider
from todosync.providers.factory import create_provider, register

__all__ = ["DryRunOperation", "DryRunProvider", "create_provider", "register"]
