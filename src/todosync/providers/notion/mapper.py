"""Mapping between Notion pages and todosync records."""

from __future__ import annotations

import logging
from typing import Any

from todosync.contracts.config import FieldConfig
from todosync.contracts.exceptions import MalformedRemoteField
from todosync.contracts.record import FieldSupport, RecordFields, RemoteRecord

logger = logging.getLogger(__name__)

# Notion rejects rich text objects longer than this.
RICH_TEXT_LIMIT = 2000

_TEXT_TYPES = frozenset({"title", "rich_text"})
_OPTION_TYPES = frozenset({"select", "status"})

# Property types each field can be written to and read back from.
_ROUND_TRIP_TYPES: dict[str, frozenset[str]] = {
    "text": _TEXT_TYPES,
    "file_path": _TEXT_TYPES,
    "kind": _TEXT_TYPES | _OPTION_TYPES,
    "status": _TEXT_TYPES | _OPTION_TYPES,
    "line_number": _TEXT_TYPES | {"number"},
}


def record_from_page(page: dict[str, Any], field_config: FieldConfig) -> RemoteRecord:
    """Build a :class:`RemoteRecord` from a Notion page object.

    Fields with an unexpected shape are logged and left at their defaults;
    only a page without an id is rejected.
    """
    key = page.get("id")
    if not isinstance(key, str) or not key:
        raise MalformedRemoteField("Notion page has no id", field="id")

    properties = page.get("properties")
    if not isinstance(properties, dict):
        logger.warning("Notion page %s has no properties", key)
        properties = {}

    marker_id = _text(properties, field_config.marker_id, key).strip()
    return RemoteRecord(
        key=key,
        marker_id=marker_id or None,
        text=_text(properties, field_config.title, key),
        kind=_option(properties, field_config.kind, key),
        status=_option(properties, field_config.status, key),
        file_path=_text(properties, field_config.file_path, key),
        line_number=_line_number(properties, field_config.line_number, key),
        archived=bool(page.get("archived") or page.get("in_trash")),
    )


def field_support_for(schema: dict[str, str], field_config: FieldConfig) -> FieldSupport:
    """Fields that survive a write and a read against a database with *schema*."""
    names = {
        "text": field_config.title,
        "kind": field_config.kind,
        "status": field_config.status,
        "file_path": field_config.file_path,
        "line_number": field_config.line_number,
    }
    stored = frozenset(field for field, name in names.items() if schema.get(name) in _ROUND_TRIP_TYPES[field])
    return FieldSupport(stored=stored, text_limit=RICH_TEXT_LIMIT)


def properties_from_fields(
    fields: RecordFields,
    schema: dict[str, str],
    field_config: FieldConfig,
) -> dict[str, Any]:
    """Build the Notion ``properties`` payload for *fields*.

    *schema* maps property names to Notion property types. A field whose
    property is absent from the schema, or has a type we cannot write, is
    left out and logged.
    """
    values: list[tuple[str, object]] = [
        (field_config.title, fields.text),
        (field_config.kind, fields.kind.value),
        (field_config.file_path, fields.file_path),
        (field_config.line_number, fields.line_number),
        (field_config.marker_id, fields.marker_id),
    ]
    if fields.status is not None:
        values.append((field_config.status, fields.status))

    properties: dict[str, Any] = {}
    skipped: list[str] = []
    for name, value in values:
        prop_type = schema.get(name)
        payload = _property_value(prop_type, value) if prop_type else None
        if payload is None:
            skipped.append(name)
            continue
        properties[name] = payload

    if skipped:
        logger.warning(
            "Properties not written for marker %s (missing from the database or unsupported type): %s",
            fields.marker_id,
            ", ".join(skipped),
        )
    return properties


def _property_value(prop_type: str, value: object) -> dict[str, Any] | None:
    if prop_type in _TEXT_TYPES:
        return {prop_type: [{"type": "text", "text": {"content": str(value)[:RICH_TEXT_LIMIT]}}]}
    if prop_type in _OPTION_TYPES:
        # Notion option names cannot contain commas.
        name = str(value).replace(",", " ").strip()
        return {prop_type: {"name": name}} if name else None
    if prop_type == "number":
        return {"number": value} if isinstance(value, int) else None
    return None


def _text(properties: dict[str, Any], name: str, key: str) -> str:
    prop = properties.get(name)
    if prop is None:
        return ""
    if not isinstance(prop, dict):
        logger.warning("Property %r of page %s is malformed", name, key)
        return ""
    prop_type = prop.get("type")
    if prop_type not in _TEXT_TYPES:
        if prop_type is not None:
            logger.warning("Property %r of page %s has type %r; expected text", name, key, prop_type)
        return ""
    fragments = prop.get(prop_type)
    if not isinstance(fragments, list):
        logger.warning("Property %r of page %s is malformed", name, key)
        return ""
    parts: list[str] = []
    for fragment in fragments:
        if not isinstance(fragment, dict):
            continue
        plain = fragment.get("plain_text")
        if not isinstance(plain, str):
            content = fragment.get("text")
            plain = content.get("content") if isinstance(content, dict) else None
        if isinstance(plain, str):
            parts.append(plain)
    return "".join(parts)


def _option(properties: dict[str, Any], name: str, key: str) -> str:
    prop = properties.get(name)
    if prop is None:
        return ""
    if not isinstance(prop, dict):
        logger.warning("Property %r of page %s is malformed", name, key)
        return ""
    prop_type = prop.get("type")
    if prop_type in _TEXT_TYPES:
        return _text(properties, name, key)
    if prop_type not in _OPTION_TYPES:
        if prop_type is not None:
            logger.warning("Property %r of page %s has type %r; expected an option", name, key, prop_type)
        return ""
    option = prop.get(prop_type)
    if option is None:
        return ""
    if not isinstance(option, dict) or not isinstance(option.get("name"), str):
        logger.warning("Property %r of page %s is malformed", name, key)
        return ""
    return option["name"]


def _line_number(properties: dict[str, Any], name: str, key: str) -> int | None:
    prop = properties.get(name)
    if isinstance(prop, dict) and prop.get("type") == "number":
        number = prop.get("number")
        if number is None:
            return None
        if isinstance(number, (int, float)) and not isinstance(number, bool):
            return int(number)
        logger.warning("Property %r of page %s is malformed", name, key)
        return None

    raw = _text(properties, name, key).strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Property %r of page %s is not a line number: %r", name, key, raw)
        return None
