"""Factory for creating provider instances.

Decouples provider selection from provider implementation: the SDK asks for a
provider by name without importing concrete providers.
"""

from __future__ import annotations

from todosync.contracts.config import FieldConfig
from todosync.contracts.exceptions import ConfigError
from todosync.contracts.provider import Provider
from todosync.providers.notion.provider import NotionProvider

_REGISTRY: dict[str, type[Provider]] = {}


def register(name: str, provider_cls: type[Provider]) -> None:
    """Register a provider class by name.

    Args:
        name: Provider name (e.g. "notion").
        provider_cls: Provider class accepting the keyword arguments of
            :func:`create_provider`.
    """
    _REGISTRY[name] = provider_cls


def create_provider(
    name: str,
    *,
    database_id: str,
    token: str,
    field_config: FieldConfig | None = None,
    **kwargs: object,
) -> Provider:
    """Create a provider instance by name.

    The returned provider is an async context manager::

        async with create_provider("notion", database_id=..., token=...) as provider:
            records = await provider.list_records()

    Raises:
        ConfigError: If the provider name is not registered.
    """
    provider_cls = _REGISTRY.get(name)
    if provider_cls is None:
        available = ", ".join(sorted(_REGISTRY)) or "(none registered)"
        raise ConfigError(f"Unknown provider: {name!r}. Available: {available}")
    return provider_cls(database_id=database_id, token=token, field_config=field_config, **kwargs)  # type: ignore[call-arg]


register("notion", NotionProvider)
