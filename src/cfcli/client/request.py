"""Turn an :class:`~cfcli.models.Operation` plus CLI values into an HTTP request.

The command tree says *where* each parameter goes; this module puts the
values there:

* **path** parameters are percent-encoded and substituted into the
  ``{name}`` placeholders of the path template. ``account_id`` and
  ``zone_id`` style parameters fall back to the configured defaults.
* **query** and **header** parameters become ordered ``(name, value)``
  pairs. List parameters accept repeated flags as well as comma-separated
  values.
* Any other location is ignored.

The JSON body comes from ``--body`` (inline JSON or ``@file``) or
``--body-file``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional
from urllib.parse import quote

from cfcli.exceptions import InvalidUsageError
from cfcli.models import Operation, ParamDef

ParamKey = tuple[str, str]

_ACCOUNT_PARAM_NAMES = frozenset({"account_id", "account_identifier", "accountId"})
_ZONE_PARAM_NAMES = frozenset({"zone_id", "zone_identifier", "zoneId"})


@dataclass
class PreparedRequest:
    """Everything the HTTP client needs to send one call."""

    method: str
    path: str
    query: list[tuple[str, str]] = field(default_factory=list)
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: Any = None


def param_key(param: ParamDef) -> ParamKey:
    """Key identifying *param* among an operation's parameters."""
    return (param.name, param.location)


def build_request(
    op: Operation,
    values: Mapping[ParamKey, Any],
    *,
    account_id: Optional[str] = None,
    zone_id: Optional[str] = None,
    body: Any = None,
) -> PreparedRequest:
    """Build the request for *op* from the values given on the command line.

    Args:
        op: The operation being invoked.
        values: CLI values keyed by :func:`param_key`. A value is ``None``
            when the flag was not given, a string for scalar flags, and a
            sequence of strings for list flags.
        account_id: Default for account identifier path parameters.
        zone_id: Default for zone identifier path parameters.
        body: Already-decoded JSON body, see :func:`load_body`.

    Returns:
        The prepared request.

    Raises:
        InvalidUsageError: If a path parameter has no value, or a required
            query/header parameter was not supplied.
    """
    request = PreparedRequest(method=op.method, path=op.path, body=body)
    defaults = {name: account_id for name in _ACCOUNT_PARAM_NAMES}
    defaults.update({name: zone_id for name in _ZONE_PARAM_NAMES})

    for param in op.parameters:
        raw = values.get(param_key(param))

        if param.location == "path":
            value = _scalar(raw) or defaults.get(param.name)
            if value is None:
                raise InvalidUsageError(f"missing path param {param.name}")
            request.path = request.path.replace(
                "{" + param.name + "}", quote(value, safe="")
            )

        elif param.location in ("query", "header"):
            collected = _collect_values(param, raw)
            if param.required and not collected:
                raise InvalidUsageError(f"missing {param.location} param {param.name}")
            target = request.query if param.location == "query" else request.headers
            target.extend((param.name, value) for value in collected)

    return request


def _scalar(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    if isinstance(raw, (list, tuple)):
        return str(raw[-1]) if raw else None
    return str(raw)


def _collect_values(param: ParamDef, raw: Any) -> list[str]:
    """Flatten the CLI value(s) of one query/header parameter."""
    if raw is None:
        return []
    if param.list:
        items = raw if isinstance(raw, (list, tuple)) else [raw]
        values: list[str] = []
        for item in items:
            values.extend(split_list(str(item)))
        return values
    scalar = _scalar(raw)
    return [] if scalar is None else [scalar]


def split_list(value: str) -> list[str]:
    """Split a comma-separated flag value, dropping empty items.

    Example::

        >>> split_list("a, b,,c")
        ['a', 'b', 'c']
        >>> split_list("single")
        ['single']
    """
    if "," not in value:
        return [value]
    return [item.strip() for item in value.split(",") if item.strip()]


def split_key_value(item: str) -> Optional[tuple[str, str]]:
    """Split ``KEY=VALUE`` (or ``KEY:VALUE``) on the first separator.

    ``=`` wins over ``:`` so values such as URLs survive intact.
    """
    if "=" in item:
        key, value = item.split("=", 1)
        return key, value
    if ":" in item:
        key, value = item.split(":", 1)
        return key, value
    return None


def parse_key_values(items: Optional[Iterable[str]]) -> list[tuple[str, str]]:
    """Parse repeated ``KEY=VALUE`` flags, dropping items without a separator."""
    pairs: list[tuple[str, str]] = []
    for item in items or []:
        pair = split_key_value(item)
        if pair is not None:
            pairs.append(pair)
    return pairs


def load_body(body: Optional[str] = None, body_file: Optional[str] = None) -> Any:
    """Decode the JSON request body from ``--body`` or ``--body-file``.

    ``--body`` takes inline JSON, or ``@path`` to read a file.

    Returns:
        The decoded JSON value, or ``None`` when neither option was given.

    Raises:
        InvalidUsageError: If both options are given, the file cannot be
            read, or the content is not valid JSON.
    """
    if body is not None and body_file is not None:
        raise InvalidUsageError("--body and --body-file are mutually exclusive")

    if body is not None and body.startswith("@"):
        body, body_file = None, body[1:]

    if body is not None:
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise InvalidUsageError(f"invalid JSON body: {exc}") from exc

    if body_file is not None:
        path = Path(body_file)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InvalidUsageError(f"cannot read body file {path}: {exc}") from exc
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise InvalidUsageError(f"invalid JSON body file {path}: {exc}") from exc

    return None
