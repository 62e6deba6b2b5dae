"""``cfcli api`` -- raw call to any endpoint.

No operation from the command tree is needed, but the tree's endpoint is
still used when no flag, environment variable or config value sets one.
"""

from __future__ import annotations

from typing import Optional

import typer

from cfcli.client.request import PreparedRequest, load_body, parse_key_values
from cfcli.commands.dynamic import run_request
from cfcli.exceptions import InvalidUsageError
from cfcli.models import HTTPMethod


def api_command(
    ctx: typer.Context,
    method: str = typer.Argument(help="HTTP method, e.g. GET."),
    path: str = typer.Argument(help="Path relative to the endpoint, e.g. /zones."),
    query: Optional[list[str]] = typer.Option(
        None, "--query", help="Query parameter KEY=VALUE (repeatable)."
    ),
    body: Optional[str] = typer.Option(
        None, "--body", help="JSON request body, or @path to read it from a file."
    ),
    body_file: Optional[str] = typer.Option(
        None, "--body-file", help="Path to a file holding the JSON request body."
    ),
) -> None:
    """Call any API endpoint directly.

    Example::

        cfcli api GET /zones --query per_page=5
        cfcli api POST /zones/abc/dns_records --body @record.json
    """
    try:
        method = HTTPMethod(method.lower()).value.upper()
    except ValueError:
        raise InvalidUsageError(f"unsupported http method: {method}") from None

    request = PreparedRequest(
        method=method,
        path=path,
        query=parse_key_values(query),
        body=load_body(body, body_file),
    )
    run_request(ctx, request)
