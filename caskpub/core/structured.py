"""Narrowing helpers for parsed JSON/TOML.

``package.json``, ``tauri.conf.json`` and ``release.toml`` all arrive as
``object``; these helpers check shapes at runtime so callers get typed values.
"""

from __future__ import annotations

from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    return isinstance(obj, dict) and all(
        isinstance(key, str) for key in cast(dict[object, object], obj)
    )


def as_str_dict(obj: object) -> StrDict | None:
    return obj if is_str_dict(obj) else None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Stripped string at ``key``; None when absent, not a string, or blank."""
    match table.get(key):
        case str(text) if text.strip():
            return text.strip()
        case _:
            return None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))


def get_str_list(table: Mapping[str, object], key: str) -> list[str] | None:
    """Non-empty list of non-blank strings at ``key``, else None."""
    value = table.get(key)
    if not isinstance(value, list):
        return None
    items = [item for item in cast(list[object], value) if isinstance(item, str)]
    if not items or len(items) != len(cast(list[object], value)):
        return None
    if any(not item.strip() for item in items):
        return None
    return items
