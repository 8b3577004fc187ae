"""Yuque client variants."""

from yuque_sdk.clients.base import BaseYuqueClient, DocCallback
from yuque_sdk.clients.password import PasswordClient
from yuque_sdk.clients.token import TokenClient

__all__ = [
    "BaseYuqueClient",
    "DocCallback",
    "PasswordClient",
    "TokenClient",
]
