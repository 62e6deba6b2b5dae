"""Name normalisation shared by resources, operations and flags.

Every identifier the CLI exposes -- resource groups, operation commands and
``--flag`` options -- is a *slug*: ASCII alphanumeric runs, lowercased and
joined by single dashes, with no leading or trailing dash. The functions
here are pure and total: any input string, including the empty string or
one made only of symbols, yields a valid (possibly empty) slug.
"""

from __future__ import annotations

import re
from collections.abc import Container

# Runs of anything outside ASCII letters and digits.
_SEPARATOR_RE = re.compile(r"[^A-Za-z0-9]+")


def normalize_name(text: str) -> str:
    """Turn arbitrary text into a slug.

    Example::

        >>> normalize_name("DNS Records for a Zone")
        'dns-records-for-a-zone'
        >>> normalize_name("zones_{zone_id}_settings")
        'zones-zone-id-settings'
        >>> normalize_name("***")
        ''
    """
    return _SEPARATOR_RE.sub("-", text).strip("-").lower()


def normalize_flag(name: str) -> str:
    """Derive the CLI flag for a parameter called *name*.

    Same as :func:`normalize_name`, with any ``--`` collapsed so that names
    such as ``__cursor`` never turn into decorative markers.
    """
    flag = normalize_name(name)
    while "--" in flag:
        flag = flag.replace("--", "-")
    return flag


def unique_op_name(existing: Container[str], base: str, method: str) -> str:
    """Pick a name for a new operation that is not in *existing*.

    Candidates are tried in order: *base*, then ``{base}-{method}``, then
    ``{base}-{method}-2``, ``{base}-{method}-3`` and so on.

    Args:
        existing: Operation names already taken in the target resource.
        base: The slug of the operation identifier.
        method: HTTP method of the operation (any case).

    Returns:
        The first free candidate.

    Example::

        >>> unique_op_name({"get"}, "get", "POST")
        'get-post'
        >>> unique_op_name({"get", "get-get"}, "get", "get")
        'get-get-2'
    """
    if base not in existing:
        return base

    candidate = f"{base}-{method.lower()}"
    if candidate not in existing:
        return candidate

    idx = 2
    while f"{candidate}-{idx}" in existing:
        idx += 1
    return f"{candidate}-{idx}"
