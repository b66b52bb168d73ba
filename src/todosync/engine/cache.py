"""Per-buffer cache of the markers seen at the last successful push."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from todosync.contracts.exceptions import ConfigError, SyncError
from todosync.contracts.marker import Marker

logger = logging.getLogger(__name__)


class CacheFile(BaseModel):
    """On-disk form of a :class:`LocalCache`."""

    buffers: dict[str, dict[str, Marker]] = Field(default_factory=dict)


class LocalCache:
    """Maps a buffer key to ``{marker_id: Marker}``.

    Entries are only ever replaced per buffer; there is no eviction and no
    aggregation across buffers.
    """

    def __init__(self, entries: Mapping[str, Mapping[str, Marker]] | None = None) -> None:
        self._entries: dict[str, dict[str, Marker]] = {key: dict(value) for key, value in (entries or {}).items()}

    def get(self, buffer_key: str) -> dict[str, Marker]:
        return dict(self._entries.get(buffer_key, {}))

    def set(self, buffer_key: str, markers: Mapping[str, Marker]) -> None:
        self._entries[buffer_key] = dict(markers)

    def keys(self, buffer_key: str) -> set[str]:
        return set(self._entries.get(buffer_key, {}))

    def discard(self, buffer_key: str, marker_ids: Iterable[str]) -> None:
        entries = self._entries.get(buffer_key)
        if not entries:
            return
        for marker_id in marker_ids:
            entries.pop(marker_id, None)

    def buffer_keys(self) -> list[str]:
        return sorted(self._entries)

    def to_file(self) -> CacheFile:
        return CacheFile(buffers={key: dict(value) for key, value in self._entries.items()})


def load_cache(path: Path) -> LocalCache:
    if not path.exists():
        return LocalCache()
    try:
        payload: Any = json.loads(path.read_text(encoding="utf-8"))
        cache_file = CacheFile.model_validate(payload)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"invalid cache file: {path}") from exc
    logger.debug("Loaded cache for %d buffers from %s", len(cache_file.buffers), path)
    return LocalCache(cache_file.buffers)


def persist_cache(cache: LocalCache, path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(cache.to_file().model_dump_json(indent=2), encoding="utf-8")
    except OSError as exc:
        raise SyncError(f"failed to persist cache: {path}") from exc
