"""Total accessors over an untyped OpenAPI document.

A loaded document is a tree of plain values: ``dict``, ``list``, ``str``,
``int``/``float``, ``bool`` and ``None``. OpenAPI documents in the wild are
frequently incomplete or slightly wrong, so every helper here answers
"the field, if it has the expected type" and ``None`` (or a default)
otherwise. None of them raise.
"""

from __future__ import annotations

from typing import Any, Optional


def as_mapping(value: Any) -> Optional[dict[Any, Any]]:
    """Return *value* if it is a mapping, else ``None``."""
    return value if isinstance(value, dict) else None


def get_mapping(value: Any, key: str) -> Optional[dict[Any, Any]]:
    """Return ``value[key]`` when *value* is a mapping and the field is one too."""
    mapping = as_mapping(value)
    if mapping is None:
        return None
    return as_mapping(mapping.get(key))


def get_sequence(value: Any, key: str) -> Optional[list[Any]]:
    """Return ``value[key]`` when it is a list."""
    mapping = as_mapping(value)
    if mapping is None:
        return None
    field = mapping.get(key)
    return field if isinstance(field, list) else None


def get_str(value: Any, key: str) -> Optional[str]:
    """Return ``value[key]`` when it is a string.

    Numbers and booleans are *not* coerced: ``version: 4`` in YAML is an
    integer, and treating it as missing matches how the rest of the
    document is read.
    """
    mapping = as_mapping(value)
    if mapping is None:
        return None
    field = mapping.get(key)
    return field if isinstance(field, str) else None


def get_bool(value: Any, key: str, default: bool = False) -> bool:
    """Return ``value[key]`` when it is a real boolean, else *default*."""
    mapping = as_mapping(value)
    if mapping is None:
        return default
    field = mapping.get(key)
    return field if isinstance(field, bool) else default


def has_key(value: Any, key: str) -> bool:
    """Return ``True`` when *value* is a mapping containing *key*."""
    mapping = as_mapping(value)
    return mapping is not None and key in mapping


def dig(value: Any, *keys: Any) -> Any:
    """Follow *keys* through nested mappings and sequences.

    String keys index mappings, integer keys index sequences. Any miss or
    type mismatch along the way yields ``None``.

    Example::

        >>> dig({"servers": [{"url": "https://x"}]}, "servers", 0, "url")
        'https://x'
    """
    current = value
    for key in keys:
        if isinstance(key, int) and not isinstance(key, bool):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return None
            current = current[key]
        else:
            mapping = as_mapping(current)
            if mapping is None or key not in mapping:
                return None
            current = mapping[key]
    return current
