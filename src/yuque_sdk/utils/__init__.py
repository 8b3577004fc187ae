"""Utility functions and classes."""

from yuque_sdk.utils.crypto import encrypt_password
from yuque_sdk.utils.rate_limiter import RateLimiter
from yuque_sdk.utils.retry import call_with_retry

__all__ = [
    "RateLimiter",
    "call_with_retry",
    "encrypt_password",
]
