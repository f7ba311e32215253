"""
Core module - Configuration, envelope models, payload types and errors.
"""
from browserless_client.core.models import (
    BrowserlessConfig,
    BrowserlessResponse,
    PdfResponse,
    ScreenshotResponse,
    WebSocketOptions,
    WebSocketResponse,
)
from browserless_client.core.errors import (
    BrowserlessError,
    BrowserlessConfigError,
    BrowserlessConnectionError,
    BrowserlessTimeoutError,
    BrowserlessHTTPError,
)

__all__ = [
    "BrowserlessConfig",
    "BrowserlessResponse",
    "PdfResponse",
    "ScreenshotResponse",
    "WebSocketOptions",
    "WebSocketResponse",
    "BrowserlessError",
    "BrowserlessConfigError",
    "BrowserlessConnectionError",
    "BrowserlessTimeoutError",
    "BrowserlessHTTPError",
]
