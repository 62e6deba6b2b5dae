"""Synchronous HTTP client with bearer auth, dry-run, and retry.

This module provides :class:`ApiClient`, the blocking HTTP client used by
every API command. It wraps :class:`httpx.Client` and layers on:

- **Auth injection** -- the API token is sent as
  ``Authorization: Bearer <token>`` on every request.
- **Dry-run mode** -- prints the request to stderr and returns a synthetic
  response without sending traffic.
- **Retry with backoff** -- retries on 5xx and network errors with
  exponential delay (1 s, 2 s, 4 s, ...).

HTTP error statuses are *not* raised by :meth:`ApiClient.execute`: the
caller prints the API's error payload first and then calls
:func:`raise_for_status` to obtain the matching exit code.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import httpx

from cfcli import __version__
from cfcli.exceptions import AuthError, ConnectionError_, NotFoundError, ServerError
from cfcli.models import RequestConfig
from cfcli.output import get_output


@dataclass
class ApiResponse:
    """Status code and decoded body of an API response.

    ``body`` is the decoded JSON value, or the raw text when the payload is
    not JSON.
    """

    status: int
    body: Any


def build_url(base: str, path: str) -> str:
    """Join *base* and *path* with exactly one slash between them."""
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


class ApiClient:
    """Synchronous HTTP client for Cloudflare API calls.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        base_url: API base URL, e.g. ``https://api.cloudflare.com/client/v4``.
        token: API token sent as a bearer credential.
        request_config: Timeout, retry and SSL settings.
        dry_run: When ``True``, requests are printed to stderr and a
            synthetic 200 response is returned without network I/O.

    Example::

        with ApiClient(base_url, token) as client:
            response = client.execute("GET", "/zones")
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        request_config: Optional[RequestConfig] = None,
        dry_run: bool = False,
    ) -> None:
        self._base_url = base_url
        self._token = token
        self._config = request_config or RequestConfig()
        self._dry_run = dry_run
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> ApiClient:
        self._client = httpx.Client(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
            headers={"User-Agent": f"cfcli/{__version__}"},
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request method
    # ------------------------------------------------------------------ #

    def execute(
        self,
        method: str,
        path: str,
        query: Sequence[tuple[str, str]] = (),
        headers: Sequence[tuple[str, str]] = (),
        body: Any = None,
    ) -> ApiResponse:
        """Send one request and decode the response.

        Args:
            method: HTTP method (any case).
            path: URL path appended to the base URL.
            query: Ordered query pairs; repeated names are sent repeatedly.
            headers: Extra request headers, applied after the defaults.
            body: JSON-serialisable body, or ``None`` for no body.

        Returns:
            The :class:`ApiResponse`, whatever its status code.

        Raises:
            ConnectionError_: On network / timeout errors after all retries.
        """
        method = method.upper()
        url = build_url(self._base_url, path)

        request_headers: list[tuple[str, str]] = [
            ("Authorization", f"Bearer {self._token}"),
            ("Accept", "application/json"),
        ]
        if body is not None:
            request_headers.append(("Content-Type", "application/json"))
        request_headers.extend(headers)

        if self._dry_run:
            return self._print_dry_run(method, url, list(query), request_headers, body)

        response = self._execute_with_retry(method, url, list(query), request_headers, body)
        return ApiResponse(status=response.status_code, body=decode_body(response))

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _execute_with_retry(
        self,
        method: str,
        url: str,
        query: list[tuple[str, str]],
        headers: list[tuple[str, str]],
        body: Any,
    ) -> httpx.Response:
        """Execute the HTTP request with exponential-backoff retry.

        Retries on 5xx status codes and connection / timeout errors up to
        ``max_retries`` times. The delay doubles each attempt: 1 s, 2 s, 4 s, ...
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        max_retries = self._config.max_retries
        output = get_output()

        for attempt in range(max_retries + 1):
            try:
                kwargs: dict[str, Any] = {
                    "method": method,
                    "url": url,
                    "headers": headers,
                    "params": query,
                }
                if body is not None:
                    kwargs["content"] = json.dumps(body).encode("utf-8")

                response = self._client.request(**kwargs)

                if response.status_code >= 500 and attempt < max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Server error {response.status_code}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(delay)
                    continue

                return response

            except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(delay)
                    continue
                raise ConnectionError_(
                    f"Connection failed after {max_retries + 1} attempts: {exc}"
                ) from exc

        raise ServerError("Request failed after all retries")  # pragma: no cover

    def _print_dry_run(
        self,
        method: str,
        url: str,
        query: list[tuple[str, str]],
        headers: list[tuple[str, str]],
        body: Any,
    ) -> ApiResponse:
        """Print request details to stderr and return a synthetic 200 response."""
        output = get_output()
        output.info(f"[dry-run] {method} {url}")

        for key, value in headers:
            if key == "Authorization":
                value = "Bearer ***"
            output.info(f"  Header: {key}: {value}")

        for key, value in query:
            output.info(f"  Param: {key}={value}")

        if body is not None:
            output.info(f"  Body (JSON): {json.dumps(body, indent=2)}")

        return ApiResponse(
            status=200,
            body={"dry_run": True, "message": "Request was not sent"},
        )


def decode_body(response: httpx.Response) -> Any:
    """Decode *response* as JSON, falling back to the raw text.

    Returns ``None`` for an empty body (e.g. ``204 No Content``).
    """
    if not response.content:
        return None
    text = response.text
    try:
        return json.loads(text)
    except ValueError:
        return text


def raise_for_status(response: ApiResponse) -> None:
    """Raise a typed exception for error HTTP status codes.

    Raises:
        AuthError: On 401 / 403.
        NotFoundError: On 404.
        ServerError: On any other status >= 400.
    """
    status = response.status
    if status < 400:
        return

    message = f"http {status}"
    errors = response.body.get("errors") if isinstance(response.body, dict) else None
    if isinstance(errors, list) and errors:
        first = errors[0]
        detail = first.get("message") if isinstance(first, dict) else first
        if detail:
            message = f"{message}: {detail}"

    if status in (401, 403):
        raise AuthError(message)
    if status == 404:
        raise NotFoundError(message)
    raise ServerError(message)
