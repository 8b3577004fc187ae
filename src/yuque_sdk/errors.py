"""Exception hierarchy for the Yuque clients."""


class YuqueError(Exception):
    """Base error for the SDK."""


class FatalError(YuqueError):
    """A prerequisite failed and the run cannot continue.

    Raised for missing configuration, failed authentication, failed repo
    unlock, missing embedded page state and non-200 API responses outside the
    retry path. Top-level callers are expected to exit non-zero on it.
    """

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.message = message
        self.hint = hint


class ApiError(YuqueError):
    """Non-200 API response that may be retried."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class TransportError(YuqueError):
    """Network-level failure talking to the service."""
