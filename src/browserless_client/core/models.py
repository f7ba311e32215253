"""
Browserless Client Models - Configuration, response envelope and payload data classes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from browserless_client.core.errors import BrowserlessConfigError, BrowserlessError, BrowserlessHTTPError

T = TypeVar("T")

SUPPORTED_PROTOCOLS = ("http", "https")
SUPPORTED_LIBRARIES = ("puppeteer", "playwright")
SUPPORTED_BROWSERS = ("chromium", "chrome", "firefox", "webkit")


@dataclass(frozen=True)
class BrowserlessConfig:
    """
    Connection settings for a remote Browserless instance.

    The timeout is expressed in seconds and applies to every HTTP call as
    well as to the WebSocket reachability probe.
    """

    token: str
    protocol: str = "http"
    host: str = "localhost"
    port: int = 3000
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.protocol not in SUPPORTED_PROTOCOLS:
            raise BrowserlessConfigError(
                f"Unsupported protocol: {self.protocol!r}",
                method="BrowserlessConfig",
            )
        if not self.host:
            raise BrowserlessConfigError("Host must not be empty", method="BrowserlessConfig")
        if not 1 <= self.port <= 65535:
            raise BrowserlessConfigError(
                f"Port out of range: {self.port}",
                method="BrowserlessConfig",
            )
        if self.timeout <= 0:
            raise BrowserlessConfigError(
                f"Timeout must be positive, got {self.timeout}",
                method="BrowserlessConfig",
            )

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}"


@dataclass
class BrowserlessResponse(Generic[T]):
    """
    Uniform result envelope returned by every client operation.

    A successful response always carries data and never an error; a failed
    response always carries an error message and never data. status_code is
    only set when the failure came from an HTTP response.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    def __post_init__(self) -> None:
        if self.success:
            if self.data is None or self.error is not None:
                raise ValueError("Successful response requires data and no error")
        elif not self.error or self.data is not None:
            raise ValueError("Failed response requires an error and no data")

    @classmethod
    def ok(cls, data: T) -> BrowserlessResponse[T]:
        """Create a successful response."""
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, status_code: Optional[int] = None) -> BrowserlessResponse[T]:
        """Create a failed response."""
        return cls(success=False, error=error, status_code=status_code)

    def unwrap(self) -> T:
        """
        Return the data of a successful response.

        Raises:
            BrowserlessHTTPError: If the failure came from an HTTP response.
            BrowserlessError: For any other failure.
        """
        if self.success:
            return self.data  # type: ignore[return-value]
        if self.status_code is not None:
            raise BrowserlessHTTPError(self.error or "", status_code=self.status_code, method="unwrap")
        raise BrowserlessError(self.error or "", method="unwrap")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the wire names of the envelope."""
        result: Dict[str, Any] = {"success": self.success}
        if self.success:
            result["data"] = self.data
        else:
            result["error"] = self.error
            if self.status_code is not None:
                result["statusCode"] = self.status_code
        return result


@dataclass
class PdfResponse:
    """Rendered PDF document."""
    pdf: bytes
    filename: str


@dataclass
class ScreenshotResponse:
    """Captured page image."""
    image: bytes
    filename: str
    format: str


@dataclass
class WebSocketOptions:
    """Which browser and automation library the WebSocket endpoint targets."""
    browser: str = "chromium"
    library: str = "puppeteer"


@dataclass
class WebSocketResponse:
    """Endpoint a Puppeteer or Playwright client can connect to."""
    browser_ws_endpoint: str
    session_id: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "browserWSEndpoint": self.browser_ws_endpoint,
            "sessionId": self.session_id,
        }
