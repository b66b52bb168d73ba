"""Notion database provider."""

from todosync.providers.notion.client import NotionClient
from todosync.providers.notion.provider import NotionProvider

__all__ = ["NotionClient", "NotionProvider"]
