"""Helpers for narrowing untyped TOML/JSON data at the boundaries."""

from __future__ import annotations

from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value, stripped. Missing, non-str or blank gives None."""
    value = table.get(key)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def get_float(table: Mapping[str, object], key: str) -> float | None:
    """Get a number as float. Booleans are rejected."""
    value = table.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))


def get_argv_list(table: Mapping[str, object], key: str) -> list[list[str]] | None:
    """Get a list of argv lists, e.g. ``[["npm", "i"], ["git", "push"]]``.

    Returns None unless every entry is a non-empty list of strings.
    """
    value = table.get(key)
    if not isinstance(value, list):
        return None
    out: list[list[str]] = []
    for item in cast(list[object], value):
        if not isinstance(item, list) or not item:
            return None
        argv = cast(list[object], item)
        if not all(isinstance(part, str) for part in argv):
            return None
        out.append([str(part) for part in argv])
    return out
