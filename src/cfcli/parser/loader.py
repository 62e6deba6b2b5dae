"""Read an OpenAPI document for ``cfcli gen``.

A source is ``-`` (stdin), an ``http(s)://`` URL or a local path. Reading
yields the document text plus a format hint; :func:`parse_document` then
turns the text into a plain mapping for
:func:`~cfcli.generator.compiler.compile_tree`.

Every failure here is a structural one for the compiler and surfaces as
:class:`~cfcli.exceptions.SpecParseError` (exit code 7): unreadable or
undecodable input, text that is neither JSON nor YAML, a document that is
not a mapping, or a ``paths`` member that is not a mapping.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from cfcli.exceptions import SpecParseError

FETCH_TIMEOUT = 30.0

# Format hints understood by parse_document; "" means sniff.
JSON = "json"
YAML = "yaml"

_SUFFIX_HINTS = {".json": JSON, ".yaml": YAML, ".yml": YAML}


def load_spec(source: str) -> dict[str, Any]:
    """Load the OpenAPI document named by *source*.

    Raises:
        SpecParseError: If the document cannot be read or parsed.
    """
    if source == "-":
        text, hint, origin = _read_stdin(), "", "stdin"
    elif source.startswith(("http://", "https://")):
        text, hint = _fetch(source)
        origin = source
    else:
        text, hint = _read_file(Path(source))
        origin = source

    if not text.strip():
        raise SpecParseError(f"openapi document is empty: {origin}")
    return parse_document(text, hint=hint, origin=origin)


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


def _read_stdin() -> str:
    try:
        return sys.stdin.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecParseError(f"cannot read openapi document from stdin: {exc}") from exc


def _fetch(url: str) -> tuple[str, str]:
    """GET *url*; the hint comes from the content type, then the URL suffix."""
    try:
        response = httpx.get(url, timeout=FETCH_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching openapi document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"cannot fetch openapi document from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        hint = JSON
    elif "yaml" in content_type or "yml" in content_type:
        hint = YAML
    else:
        hint = _SUFFIX_HINTS.get(Path(httpx.URL(url).path).suffix.lower(), "")
    return response.text, hint


def _read_file(path: Path) -> tuple[str, str]:
    if not path.is_file():
        raise SpecParseError(f"openapi document not found: {path}")
    try:
        text = path.read_bytes().decode("utf-8-sig")
    except OSError as exc:
        raise SpecParseError(f"cannot read openapi document {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise SpecParseError(f"openapi document {path} is not valid UTF-8: {exc}") from exc
    return text, _SUFFIX_HINTS.get(path.suffix.lower(), "")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_document(text: str, hint: str = "", origin: str = "document") -> dict[str, Any]:
    """Parse *text* as JSON or YAML and check its top-level shape.

    JSON is tried first unless *hint* says YAML: the JSON parser is much
    faster on the multi-megabyte Cloudflare schema, and YAML still accepts
    anything JSON rejects. With a JSON hint a JSON error is final.

    Raises:
        SpecParseError: If the text parses as neither format, the document
            is not a mapping, or its ``paths`` member is not a mapping.
    """
    errors: list[str] = []

    if hint != YAML:
        try:
            return _check_shape(json.loads(text), origin)
        except json.JSONDecodeError as exc:
            if hint == JSON:
                raise SpecParseError(f"invalid JSON in {origin}: {exc}") from exc
            errors.append(f"JSON: {exc}")

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        errors.append(f"YAML: {exc}")
        detail = "".join(f"\n  {error}" for error in errors)
        raise SpecParseError(f"cannot parse {origin} as JSON or YAML{detail}") from exc
    return _check_shape(document, origin)


def _check_shape(document: Any, origin: str) -> dict[str, Any]:
    if not isinstance(document, dict):
        kind = "nothing" if document is None else type(document).__name__
        raise SpecParseError(f"openapi document {origin} must be a mapping, got {kind}")
    if "paths" in document and not isinstance(document["paths"], dict):
        raise SpecParseError(f"openapi document {origin} has paths that is not a mapping")
    return document
