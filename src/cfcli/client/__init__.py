"""HTTP layer: request construction, the blocking API client, response rendering."""

from cfcli.client.request import PreparedRequest, build_request
from cfcli.client.sync_client import ApiClient, ApiResponse, raise_for_status

__all__ = [
    "ApiClient",
    "ApiResponse",
    "PreparedRequest",
    "build_request",
    "raise_for_status",
]
