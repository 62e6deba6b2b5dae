"""Extract and merge OpenAPI parameter declarations.

OpenAPI lets a path item declare ``parameters`` shared by every method under
it, and each operation declare its own. This module turns either array into
:class:`~cfcli.models.ParamDef` entries and merges the two levels.

**Extraction rules:**

* An entry needs both ``name`` and ``in``; anything else is skipped.
* ``required`` defaults to ``False``, ``description`` is optional.
* ``schema.type == "array"`` marks the parameter as a list; its
  ``schema_type`` is then ``items.type``, or the marker ``"array"`` when the
  items are untyped.
* The flag is derived with :func:`~cfcli.generator.naming.normalize_flag`.

**Merge rule:** parameters are keyed by ``(name, location)``; an
operation-level entry replaces the path-level entry with the same key as a
whole. The merged list is ordered by that key.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from cfcli.generator.naming import normalize_flag
from cfcli.models import ParamDef
from cfcli.parser.document import as_mapping, get_bool, get_mapping, get_str

logger = logging.getLogger(__name__)

ARRAY_MARKER = "array"
"""``schema_type`` reported for list parameters whose items carry no type."""


def collect_parameters(value: Any) -> list[ParamDef]:
    """Convert a raw ``parameters`` array into :class:`ParamDef` entries.

    Args:
        value: The ``parameters`` field of a path item or operation. Anything
            that is not a list yields an empty result.

    Returns:
        One :class:`ParamDef` per well-formed entry, in document order.
    """
    if not isinstance(value, list):
        return []

    params: list[ParamDef] = []
    for item in value:
        name = get_str(item, "name")
        location = get_str(item, "in")
        if name is None or location is None:
            logger.debug("Skipping parameter without name/in: %r", item)
            continue

        schema_type, is_list = parse_schema(get_mapping(item, "schema"))
        params.append(
            ParamDef(
                name=name,
                flag=normalize_flag(name),
                location=location,
                required=get_bool(item, "required"),
                list=is_list,
                schema_type=schema_type,
                description=get_str(item, "description"),
            )
        )

    return params


def parse_schema(schema: Any) -> tuple[Optional[str], bool]:
    """Infer ``(schema_type, list)`` from a parameter's schema.

    Example::

        >>> parse_schema({"type": "array", "items": {"type": "string"}})
        ('string', True)
        >>> parse_schema({"type": "array"})
        ('array', True)
        >>> parse_schema({"type": "integer"})
        ('integer', False)
        >>> parse_schema(None)
        (None, False)
    """
    if as_mapping(schema) is None:
        return None, False

    schema_type = _type_name(schema)
    if schema_type != "array":
        return schema_type, False

    item_type = _type_name(get_mapping(schema, "items"))
    return item_type or ARRAY_MARKER, True


def _type_name(schema: Any) -> Optional[str]:
    """Read ``schema.type``.

    OpenAPI 3.1 allows ``type`` to be a list (e.g. ``["string", "null"]``);
    the first non-null entry is used.
    """
    mapping = as_mapping(schema)
    if mapping is None:
        return None
    type_value = mapping.get("type")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if isinstance(t, str) and t != "null"]
        return non_null[0] if non_null else None
    return type_value if isinstance(type_value, str) else None


def merge_parameters(
    base: Iterable[ParamDef],
    overrides: Iterable[ParamDef],
) -> list[ParamDef]:
    """Merge path-level *base* parameters with operation-level *overrides*.

    Args:
        base: Parameters declared on the path item.
        overrides: Parameters declared on the operation.

    Returns:
        The merged parameters, one per ``(name, location)``, sorted by that
        key. Within either input a later duplicate also replaces an earlier
        one.
    """
    merged: dict[tuple[str, str], ParamDef] = {}
    for param in base:
        merged[(param.name, param.location)] = param
    for param in overrides:
        merged[(param.name, param.location)] = param
    return [merged[key] for key in sorted(merged)]
