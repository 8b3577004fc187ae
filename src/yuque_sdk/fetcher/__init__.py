"""HTTP transport for the Yuque clients."""

from yuque_sdk.fetcher.transport import HttpResponse, HttpTransport

__all__ = [
    "HttpResponse",
    "HttpTransport",
]
