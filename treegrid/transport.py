# treegrid/transport.py
"""Ways for the datasource to reach a WindowResolver: in-process or over HTTP."""
from typing import Optional

import httpx

from .models import WindowRequest, WindowResponse
from .resolver import WindowResolver
from .exceptions import InvalidRangeError, UnknownGroupError
from .display_utils import formatted_print


class LocalTransport:
    """Calls the resolver directly in the same process."""

    def __init__(self, resolver: WindowResolver):
        self.resolver = resolver

    def get_rows(self, request: WindowRequest) -> WindowResponse:
        return self.resolver.resolve_request(request)


class HttpTransport:
    """POSTs window requests to a treegrid API server's /getRows endpoint."""

    def __init__(self, base_url: str, client: Optional[httpx.Client] = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client if client is not None else httpx.Client(timeout=timeout)

    def get_rows(self, request: WindowRequest) -> WindowResponse:
        url = f"{self.base_url}/getRows"
        formatted_print(f"POST {url} {request}", level="DEBUG")
        response = self.client.post(url, json=request.to_dict())

        if response.status_code in (400, 404):
            body = _json_or_empty(response)
            status = body.get("status")
            if status == "not_found":
                group_key = body.get("groupKey") or (request.group_path[-1] if request.group_path else "root")
                raise UnknownGroupError(group_key)
            if status == "invalid_range":
                raise InvalidRangeError(request.start_row, request.end_row, body.get("message", ""))
        response.raise_for_status()
        return WindowResponse.from_dict(response.json())

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _json_or_empty(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
