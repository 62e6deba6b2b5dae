"""Compile an OpenAPI document into a :class:`~cfcli.models.CommandTree`.

This is the core algorithm of cfcli. It walks a loosely structured OpenAPI
document and produces a normalised, collision-free catalogue of resources
and operations that the CLI renders into commands.

**Algorithm summary**

1. Read the API-wide metadata: the base endpoint (``servers[0].url``) and
   the major version (``info.version`` up to the first dot).
2. Visit every path in lexical order and, under each, every method of
   :class:`~cfcli.models.HTTPMethod` in its fixed order.
3. Merge the path-level and operation-level parameters.
4. Fan each operation out to one resource per tag. Resources are created on
   first sight and keep the raw tag text as their display name; untagged
   operations are dropped, since the tag is the grouping key.
5. Name each new operation uniquely within its resource.

The compiler is pure: it performs no I/O and compiling the same logical
document twice yields identical trees, whatever the key order of the
source mappings.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from cfcli.exceptions import SpecParseError
from cfcli.generator.naming import normalize_name, unique_op_name
from cfcli.generator.params import collect_parameters, merge_parameters
from cfcli.models import CommandTree, HTTPMethod, Operation, ParamDef, Resource
from cfcli.parser.document import (
    as_mapping,
    dig,
    get_mapping,
    get_sequence,
    get_str,
    has_key,
)

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.cloudflare.com/client/v4"
"""Base URL used when the document declares no usable server."""

DEFAULT_VERSION = 4
"""Major version used when ``info.version`` is missing or not numeric."""

MAX_VERSION = 2**32 - 1
"""Largest major version the tree format stores (an unsigned 32-bit value)."""


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def compile_tree(document: Any) -> CommandTree:
    """Build a :class:`~cfcli.models.CommandTree` from a loaded OpenAPI document.

    Args:
        document: The document as returned by
            :func:`~cfcli.parser.loader.load_spec`.

    Returns:
        The compiled tree.

    Raises:
        SpecParseError: If the document has no ``paths`` mapping.

    Example::

        document = load_spec("openapi.yaml")
        tree = compile_tree(document)
        for resource in tree.resources:
            print(resource.name, [op.name for op in resource.ops])
    """
    paths = get_mapping(document, "paths")
    if paths is None:
        raise SpecParseError("openapi document missing paths")

    builders: dict[str, _ResourceBuilder] = {}

    for path in sorted(key for key in paths if isinstance(key, str)):
        path_item = as_mapping(paths[path])
        if path_item is None:
            logger.debug("Skipping path %s: path item is not a mapping", path)
            continue

        path_params = collect_parameters(path_item.get("parameters"))

        for method in HTTPMethod:
            if method.value not in path_item:
                continue
            operation = as_mapping(path_item[method.value])
            if operation is None:
                logger.debug("Skipping %s %s: operation is not a mapping", method.value, path)
                continue
            _add_operation(builders, path, method, operation, path_params)

    return CommandTree(
        version=extract_version(document),
        endpoint=extract_endpoint(document),
        resources=[builder.build() for builder in builders.values()],
    )


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


def extract_endpoint(document: Any) -> str:
    """Return ``servers[0].url``, or :data:`DEFAULT_ENDPOINT`.

    Only the first server entry is considered.
    """
    url = dig(document, "servers", 0, "url")
    if isinstance(url, str) and url:
        return url
    return DEFAULT_ENDPOINT


def extract_version(document: Any) -> int:
    """Return the major version from ``info.version``, or :data:`DEFAULT_VERSION`."""
    version = parse_major_version(get_str(get_mapping(document, "info"), "version"))
    return DEFAULT_VERSION if version is None else version


def parse_major_version(value: Optional[str]) -> Optional[int]:
    """Parse the part of *value* before the first ``.`` as an unsigned integer.

    Values above :data:`MAX_VERSION` are rejected like any other malformed
    version.

    Example::

        >>> parse_major_version("4.0.0")
        4
        >>> parse_major_version("v4") is None
        True
    """
    if value is None:
        return None
    prefix = value.split(".", 1)[0]
    if not (prefix.isascii() and prefix.isdigit()):
        return None
    major = int(prefix)
    if major > MAX_VERSION:
        return None
    return major


# ---------------------------------------------------------------------------
# Operations and resources
# ---------------------------------------------------------------------------


def _add_operation(
    builders: dict[str, _ResourceBuilder],
    path: str,
    method: HTTPMethod,
    operation: dict[Any, Any],
    path_params: list[ParamDef],
) -> None:
    """Fan *operation* out to the resource of each of its tags."""
    op_id = get_str(operation, "operationId")
    if op_id is None:
        op_id = f"{method.value}_{path}"

    parameters = merge_parameters(
        path_params, collect_parameters(operation.get("parameters"))
    )
    has_body = has_key(operation, "requestBody")
    summary = get_str(operation, "summary")
    description = get_str(operation, "description")

    tags = get_sequence(operation, "tags") or []
    if not tags:
        logger.debug("Dropping %s %s: operation has no tags", method.value.upper(), path)

    base_name = normalize_name(op_id)
    for tag in tags:
        if not isinstance(tag, str):
            continue
        slug = normalize_name(tag)
        builder = builders.get(slug)
        if builder is None:
            builder = builders[slug] = _ResourceBuilder(slug, tag)

        builder.add(
            base_name,
            method,
            display_name=op_id,
            path=path,
            summary=summary,
            description=description,
            parameters=parameters,
            has_body=has_body,
        )


class _ResourceBuilder:
    """Accumulates the operations of one resource during compilation.

    Holds the set of names already taken in the resource; it lives only as
    long as the compilation pass.
    """

    def __init__(self, name: str, display_name: str) -> None:
        self.name = name
        self.display_name = display_name
        self._ops: list[Operation] = []
        self._names: set[str] = set()

    def add(self, base_name: str, method: HTTPMethod, **fields: Any) -> Operation:
        name = unique_op_name(self._names, base_name, method.value)
        op = Operation(name=name, method=method.value.upper(), **fields)
        self._names.add(name)
        self._ops.append(op)
        return op

    def build(self) -> Resource:
        return Resource(name=self.name, display_name=self.display_name, ops=list(self._ops))
