"""
Browserless Client Error Taxonomy - Exception classes for the remote service adapter.

Public client methods never raise these; failures are reported through
BrowserlessResponse envelopes. The exceptions are raised while loading
configuration, used internally by the WebSocket probe, and by
BrowserlessResponse.unwrap() for callers that prefer exceptions.
"""
from typing import Optional


class BrowserlessError(Exception):
    """Base exception for all browserless client errors."""

    def __init__(self, message: str, method: Optional[str] = None, **context):
        super().__init__(message)
        self.message = message
        self.method = method
        self.context = context

    def __str__(self):
        parts = [self.message]
        if self.method:
            parts.append(f"method={self.method}")
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"context=({context_str})")
        return " | ".join(parts)


class BrowserlessConfigError(BrowserlessError):
    """Raised when the client configuration is missing or invalid."""
    pass


class BrowserlessConnectionError(BrowserlessError):
    """Raised when the remote service cannot be reached."""
    pass


class BrowserlessTimeoutError(BrowserlessError):
    """Raised when a call to the remote service times out."""

    def __init__(self, message: str, timeout: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timeout = timeout


class BrowserlessHTTPError(BrowserlessError):
    """Raised when the remote service answers with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code
