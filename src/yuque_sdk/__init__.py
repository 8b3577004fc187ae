"""Fetch Yuque documents and catalogs for downstream publishing."""

from yuque_sdk.clients import PasswordClient, TokenClient
from yuque_sdk.config import PasswordClientConfig, TokenClientConfig
from yuque_sdk.errors import FatalError, YuqueError
from yuque_sdk.models import DocumentDetail, DocumentSummary

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "DocumentDetail",
    "DocumentSummary",
    "FatalError",
    "PasswordClient",
    "PasswordClientConfig",
    "TokenClient",
    "TokenClientConfig",
    "YuqueError",
]
