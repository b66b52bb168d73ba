"""Config file loading and writing."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from todosync.contracts.config import TodoSyncConfig
from todosync.contracts.exceptions import ConfigError

DEFAULT_CONFIG_NAME = "todosync.json"


def _resolve_path(value: Path | None, *, base_dir: Path) -> Path | None:
    if value is None:
        return None
    if value.is_absolute():
        return value
    return (base_dir / value).resolve()


def load_config(path: str | Path) -> TodoSyncConfig:
    """Load and validate config from JSON, resolving relative paths against the config directory."""
    config_path = Path(path).expanduser().resolve()

    try:
        raw_payload: Any = json.loads(config_path.read_text(encoding="utf-8"))
        parsed = TodoSyncConfig.model_validate(raw_payload)
    except OSError as exc:
        raise ConfigError(f"failed reading config file: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file: {config_path}") from exc
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc

    return parsed.model_copy(update={"cache_path": _resolve_path(parsed.cache_path, base_dir=config_path.parent)})


def write_config(config: TodoSyncConfig, path: Path) -> None:
    """Write *config* as JSON, leaving out values that match the defaults."""
    payload = config.model_dump(mode="json", exclude_defaults=True)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"failed writing config file: {path}") from exc
