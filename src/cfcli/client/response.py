"""Response rendering -- maps an :class:`~cfcli.client.sync_client.ApiResponse` to stdout.

Cloudflare wraps every payload in an envelope::

    {"success": true, "errors": [], "messages": [], "result": {...}}

By default only ``result`` is printed; ``--raw`` prints the envelope as
received. Error responses are always printed whole so that the ``errors``
array stays visible.

See Also:
    :mod:`cfcli.output` -- the output manager that writes the data.
"""

from __future__ import annotations

from typing import Any

from cfcli.client.sync_client import ApiResponse
from cfcli.output import get_output


def unwrap_result(body: Any, raw: bool = False) -> Any:
    """Return the ``result`` member of an envelope, or *body* unchanged.

    Args:
        body: Decoded response body.
        raw: When ``True`` the body is never unwrapped.
    """
    if raw:
        return body
    if isinstance(body, dict) and "result" in body:
        return body["result"]
    return body


def render_response(response: ApiResponse, raw: bool = False, pretty: bool = False) -> None:
    """Print *response* to stdout and its status line to stderr (verbose only).

    JSON bodies are printed as JSON, text bodies verbatim, and empty bodies
    not at all.
    """
    output = get_output()
    output.debug(f"HTTP {response.status}")

    data = response.body if response.status >= 400 else unwrap_result(response.body, raw)
    if data is None and response.body is None:
        return
    if isinstance(data, str) and not isinstance(response.body, dict):
        output.print_data(data)
        return
    output.print_json(data, pretty=pretty)
