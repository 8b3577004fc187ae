"""Async HTTP transport used by both clients."""

import logging
from typing import Any, Literal

import httpx
from pydantic import BaseModel, Field

from yuque_sdk.errors import TransportError

logger = logging.getLogger(__name__)


class HttpResponse(BaseModel):
    """Decoded response of one request."""

    status: int
    headers: dict[str, str] = Field(default_factory=dict)
    set_cookies: list[str] = Field(default_factory=list)
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.status == 200


class HttpTransport:
    """Thin request layer over ``httpx.AsyncClient``.

    Use as an async context manager. ``mock_transport`` replaces the network
    layer, which is how tests drive the clients.
    """

    def __init__(
        self,
        user_agent: str,
        timeout_ms: int = 30000,
        mock_transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.user_agent = user_agent
        self.timeout_ms = timeout_ms
        self._mock_transport = mock_transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self):
        """Initialize HTTP client."""
        self._client = httpx.AsyncClient(
            headers={"User-Agent": self.user_agent},
            follow_redirects=True,
            timeout=self.timeout_ms / 1000,
            transport=self._mock_transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Clean up HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        data: dict[str, Any] | None = None,
        content_type: Literal["json", "form"] = "json",
        data_type: Literal["json", "text"] = "json",
    ) -> HttpResponse:
        """Send one request; non-2xx statuses are returned, not raised."""
        if not self._client:
            raise RuntimeError("Transport not initialized. Use 'async with' context manager.")

        method = method.upper()
        kwargs: dict[str, Any] = {"headers": {k: v for k, v in (headers or {}).items() if v is not None}}
        if data is not None:
            if method in ("GET", "HEAD", "DELETE"):
                kwargs["params"] = _query_params(data)
            elif content_type == "form":
                kwargs["data"] = data
            else:
                kwargs["json"] = data

        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        return HttpResponse(
            status=response.status_code,
            headers=dict(response.headers.items()),
            set_cookies=response.headers.get_list("set-cookie"),
            data=_decode(response, data_type),
        )


def _query_params(data: dict[str, Any]) -> dict[str, str]:
    params: dict[str, str] = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
        else:
            params[key] = str(value)
    return params


def _decode(response: httpx.Response, data_type: str) -> Any:
    if data_type == "text":
        return response.text
    try:
        return response.json()
    except ValueError:
        logger.debug("Expected JSON from %s, got %r", response.url, response.text[:200])
        return response.text
