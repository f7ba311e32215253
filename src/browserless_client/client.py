"""
Browserless Client - Async adapter for a remote Browserless instance.

Every public method forwards one call to a fixed REST path (or performs a
WebSocket reachability probe) and returns a BrowserlessResponse envelope.
Exceptions never cross the public boundary.
"""
from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
import time
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote

import httpx
import websockets
from websockets.asyncio.client import connect

from browserless_client.core.errors import BrowserlessConnectionError, BrowserlessTimeoutError
from browserless_client.core.models import (
    SUPPORTED_BROWSERS,
    SUPPORTED_LIBRARIES,
    BrowserlessConfig,
    BrowserlessResponse,
    PdfResponse,
    ScreenshotResponse,
    WebSocketOptions,
    WebSocketResponse,
)
from browserless_client.core.types import (
    BrowserQLRequest,
    ContentRequest,
    DownloadRequest,
    ExportRequest,
    FunctionRequest,
    PdfRequest,
    PerformanceRequest,
    QueryParams,
    ScreenshotRequest,
    SessionList,
    UnblockRequest,
)

logger = logging.getLogger("browserless_client")

JAVASCRIPT_CONTENT_TYPE = "application/javascript"
UNKNOWN_ERROR = "Unknown error occurred"


def setup_logging(level: int = logging.INFO, debug: bool = False):
    """Configure logging for the browserless client."""
    if debug:
        level = logging.DEBUG

    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)


def merge_token_params(base_params: Optional[QueryParams], token: str) -> Dict[str, Any]:
    """
    Merge the auth token into a set of query parameters.

    The input mapping is left untouched; every other parameter is kept as-is.
    """
    merged = dict(base_params or {})
    merged["token"] = token
    return merged


def build_ws_endpoint(config: BrowserlessConfig, options: WebSocketOptions) -> str:
    """
    Compute the WebSocket endpoint for a browser/library pair.

    Raises:
        ValueError: If the library or browser is not supported.
    """
    if options.library not in SUPPORTED_LIBRARIES:
        raise ValueError(f"Unsupported library: {options.library!r}")
    if options.browser not in SUPPORTED_BROWSERS:
        raise ValueError(f"Unsupported browser: {options.browser!r}")

    token = quote(config.token, safe="")
    if options.library == "puppeteer":
        return f"ws://{config.host}:{config.port}?token={token}"
    return f"ws://{config.host}:{config.port}/{options.browser}/playwright?token={token}"


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def _extract_error_message(response: httpx.Response) -> str:
    """Pick the most specific error message the service sent back."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value

    if body is None:
        text = response.text.strip()
        if text:
            return text[:500]

    return response.reason_phrase or f"Request failed with status code {response.status_code}"


def _parse_body(response: httpx.Response) -> Any:
    """Decode a structured response body, passing non-JSON text through."""
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return response.text
    return {} if data is None else data


class BrowserlessClient:
    """
    Async client for the Browserless REST and WebSocket APIs.

    Holds only the immutable configuration and one httpx.AsyncClient, which
    is safe to share between concurrent calls.

    Usage:
        config = BrowserlessConfig(token="...")
        async with BrowserlessClient(config) as client:
            result = await client.generate_pdf({"url": "https://example.com"})
            if result.success:
                Path(result.data.filename).write_bytes(result.data.pdf)
    """

    def __init__(
        self,
        config: BrowserlessConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Connection settings for the remote instance.
            transport: Optional httpx transport, mainly for tests.
        """
        self._config = config
        self._base_url = config.base_url

        kwargs: Dict[str, Any] = {
            "base_url": self._base_url,
            "timeout": httpx.Timeout(config.timeout),
            "headers": {"Content-Type": "application/json"},
        }
        if transport is not None:
            kwargs["transport"] = transport
        self._http = httpx.AsyncClient(**kwargs)

    async def __aenter__(self) -> BrowserlessClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the underlying HTTP transport."""
        await self._http.aclose()

    # =========================================================================
    # Request plumbing
    # =========================================================================

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[QueryParams] = None,
        json_body: Any = None,
        content: Optional[Union[str, bytes]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        logger.debug(f"{method} {path}", extra={"params": sorted(params or {})})
        response = await self._http.request(
            method,
            path,
            params=merge_token_params(params, self._config.token),
            json=json_body,
            content=content,
            headers=headers,
        )
        response.raise_for_status()
        return response

    async def _post_json(
        self,
        path: str,
        payload: Any,
        params: Optional[QueryParams],
    ) -> BrowserlessResponse[Any]:
        try:
            response = await self._send("POST", path, params=params, json_body=payload)
            return BrowserlessResponse.ok(_parse_body(response))
        except Exception as e:
            return self._handle_error(e, path)

    async def _post_script(
        self,
        path: str,
        payload: Union[str, Mapping[str, Any]],
        params: Optional[QueryParams],
    ) -> BrowserlessResponse[Any]:
        try:
            body = payload if isinstance(payload, str) else json.dumps(payload)
            response = await self._send(
                "POST",
                path,
                params=params,
                content=body,
                headers={"Content-Type": JAVASCRIPT_CONTENT_TYPE},
            )
            return BrowserlessResponse.ok(_parse_body(response))
        except Exception as e:
            return self._handle_error(e, path)

    async def _get(self, path: str) -> BrowserlessResponse[Any]:
        try:
            response = await self._send("GET", path)
            return BrowserlessResponse.ok(_parse_body(response))
        except Exception as e:
            return self._handle_error(e, path)

    def _handle_error(self, error: Exception, path: str) -> BrowserlessResponse[Any]:
        """Normalize any failure into an error envelope."""
        if isinstance(error, httpx.HTTPStatusError):
            status = error.response.status_code
            message = _extract_error_message(error.response)
            logger.warning(
                f"{path} failed with HTTP {status}: {message}",
                extra={"path": path, "status_code": status},
            )
            return BrowserlessResponse.fail(message, status_code=status)

        if isinstance(error, httpx.TimeoutException):
            message = f"Request timed out after {self._config.timeout}s"
        elif isinstance(error, httpx.RequestError):
            message = str(error) or type(error).__name__
        else:
            message = str(error) or UNKNOWN_ERROR

        logger.warning(
            f"{path} failed: {message}",
            extra={"path": path, "error_type": type(error).__name__},
        )
        return BrowserlessResponse.fail(message)

    # =========================================================================
    # Rendering
    # =========================================================================

    async def generate_pdf(
        self,
        request: PdfRequest,
        *,
        params: Optional[QueryParams] = None,
    ) -> BrowserlessResponse[PdfResponse]:
        """
        Generate a PDF from a URL or HTML content.

        Args:
            request: Payload for /pdf (url or html, options, ...).
            params: Extra query parameters such as launch flags.

        Returns:
            Envelope holding the PDF bytes and a generated filename.
        """
        try:
            response = await self._send("POST", "/pdf", params=params, json_body=request)
            return BrowserlessResponse.ok(PdfResponse(
                pdf=response.content,
                filename=f"document-{_timestamp_ms()}.pdf",
            ))
        except Exception as e:
            return self._handle_error(e, "/pdf")

    async def take_screenshot(
        self,
        request: ScreenshotRequest,
        *,
        params: Optional[QueryParams] = None,
    ) -> BrowserlessResponse[ScreenshotResponse]:
        """
        Take a screenshot of a webpage.

        The file extension follows request["options"]["type"] and defaults
        to png.
        """
        try:
            response = await self._send("POST", "/screenshot", params=params, json_body=request)
            options = request.get("options") or {}
            image_format = options.get("type") or "png"
            return BrowserlessResponse.ok(ScreenshotResponse(
                image=response.content,
                filename=f"screenshot-{_timestamp_ms()}.{image_format}",
                format=image_format,
            ))
        except Exception as e:
            return self._handle_error(e, "/screenshot")

    # =========================================================================
    # Structured endpoints
    # =========================================================================

    async def get_content(
        self,
        request: ContentRequest,
        *,
        params: Optional[QueryParams] = None,
    ) -> BrowserlessResponse[Any]:
        """Extract the rendered HTML of a webpage."""
        return await self._post_json("/content", request, params)

    async def execute_function(
        self,
        request: FunctionRequest,
        *,
        params: Optional[QueryParams] = None,
    ) -> BrowserlessResponse[Any]:
        """
        Execute custom JavaScript in a browser context.

        A string is sent as the raw script; a mapping ({"code", "context"})
        is serialized to JSON. Both go out as application/javascript.
        """
        return await self._post_script("/function", request, params)

    async def download_files(
        self,
        request: DownloadRequest,
        *,
        params: Optional[QueryParams] = None,
    ) -> BrowserlessResponse[Any]:
        """Run a download script and relay the result."""
        return await self._post_script("/download", request, params)

    async def export_page(
        self,
        request: ExportRequest,
        *,
        params: Optional[QueryParams] = None,
    ) -> BrowserlessResponse[Any]:
        """Export a webpage together with its resources."""
        return await self._post_json("/export", request, params)

    async def run_performance_audit(
        self,
        request: PerformanceRequest,
        *,
        params: Optional[QueryParams] = None,
    ) -> BrowserlessResponse[Any]:
        """Run a Lighthouse performance audit."""
        return await self._post_json("/performance", request, params)

    async def unblock(
        self,
        request: UnblockRequest,
        *,
        params: Optional[QueryParams] = None,
    ) -> BrowserlessResponse[Any]:
        """Load a page past bot detection."""
        return await self._post_json("/unblock", request, params)

    async def execute_browser_ql(
        self,
        request: BrowserQLRequest,
        *,
        params: Optional[QueryParams] = None,
    ) -> BrowserlessResponse[Any]:
        """Execute a BrowserQL (GraphQL) query."""
        return await self._post_json("/chromium/bql", request, params)

    # =========================================================================
    # WebSocket
    # =========================================================================

    async def _open_and_close(self, endpoint: str) -> None:
        async with connect(endpoint, open_timeout=self._config.timeout):
            pass

    async def _probe_websocket(self, endpoint: str) -> None:
        timeout = self._config.timeout
        try:
            # connect() only bounds the opening handshake; the closing one is covered here
            await asyncio.wait_for(self._open_and_close(endpoint), timeout=timeout)
        except (asyncio.TimeoutError, TimeoutError) as e:
            raise BrowserlessTimeoutError(
                f"timed out after {timeout}s",
                timeout=timeout,
                method="create_websocket_connection",
            ) from e
        except (OSError, websockets.exceptions.WebSocketException) as e:
            raise BrowserlessConnectionError(
                str(e) or type(e).__name__,
                method="create_websocket_connection",
            ) from e

    async def create_websocket_connection(
        self,
        options: Optional[WebSocketOptions] = None,
    ) -> BrowserlessResponse[WebSocketResponse]:
        """
        Compute a Puppeteer/Playwright endpoint and check that it accepts connections.

        The socket is closed as soon as the handshake completes; nothing is
        kept open after the call returns.

        Args:
            options: Browser and library to target. Defaults to chromium/puppeteer.

        Returns:
            Envelope holding the endpoint and a generated session id.
        """
        options = options or WebSocketOptions()
        try:
            endpoint = build_ws_endpoint(self._config, options)
        except ValueError as e:
            return BrowserlessResponse.fail(str(e))

        try:
            await self._probe_websocket(endpoint)
        except (BrowserlessConnectionError, BrowserlessTimeoutError) as e:
            logger.warning(
                f"WebSocket probe failed: {e.message}",
                extra={"library": options.library, "browser": options.browser},
            )
            return BrowserlessResponse.fail(f"WebSocket connection failed: {e.message}")
        except Exception as e:
            return self._handle_error(e, "websocket")

        logger.info(f"WebSocket endpoint reachable ({options.library}/{options.browser})")
        return BrowserlessResponse.ok(WebSocketResponse(
            browser_ws_endpoint=endpoint,
            session_id=f"session-{_timestamp_ms()}",
        ))

    # =========================================================================
    # Introspection
    # =========================================================================

    async def get_health(self) -> BrowserlessResponse[Any]:
        """Get the health status of the instance."""
        return await self._get("/health")

    async def get_sessions(self) -> BrowserlessResponse[SessionList]:
        """List active browser sessions."""
        return await self._get("/sessions")

    async def get_config(self) -> BrowserlessResponse[Any]:
        """Get the configuration reported by the instance."""
        return await self._get("/config")

    async def get_metrics(self) -> BrowserlessResponse[Any]:
        """Get usage metrics."""
        return await self._get("/metrics")

    # =========================================================================
    # Accessors
    # =========================================================================

    def get_base_url(self) -> str:
        """Get the base URL for this client."""
        return self._base_url

    def get_current_config(self) -> BrowserlessConfig:
        """Get a copy of the current configuration."""
        return dataclasses.replace(self._config)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def config(self) -> BrowserlessConfig:
        return self.get_current_config()
