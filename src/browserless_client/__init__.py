"""
Browserless Client - An async adapter for remote Browserless instances.

This package forwards calls to the Browserless REST and WebSocket APIs and
returns every result in a uniform envelope instead of raising.

Usage:
    from browserless_client import BrowserlessClient, BrowserlessConfig

    async with BrowserlessClient(BrowserlessConfig(token="...")) as client:
        result = await client.take_screenshot({
            "url": "https://example.com",
            "options": {"type": "jpeg"},
        })
        if result.success:
            print(result.data.filename)
        else:
            print(result.error, result.status_code)

For host tool integration:
    from browserless_client import get_tool_schemas, execute_tool

    tools = get_tool_schemas(format="anthropic")
    result = await execute_tool(client, "get_content", {"url": "https://example.com"})
"""
from browserless_client.client import (
    BrowserlessClient,
    build_ws_endpoint,
    merge_token_params,
    setup_logging,
)
from browserless_client.config import config_from_env
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
from browserless_client.host.tools import (
    TOOL_DEFINITIONS,
    ToolExecutionResult,
    execute_tool,
    get_tool_schemas,
)

__version__ = "0.1.0"

__all__ = [
    # Main API
    "BrowserlessClient",
    "BrowserlessConfig",
    "config_from_env",
    "setup_logging",
    "merge_token_params",
    "build_ws_endpoint",
    # Envelope and payloads
    "BrowserlessResponse",
    "PdfResponse",
    "ScreenshotResponse",
    "WebSocketOptions",
    "WebSocketResponse",
    # Errors
    "BrowserlessError",
    "BrowserlessConfigError",
    "BrowserlessConnectionError",
    "BrowserlessTimeoutError",
    "BrowserlessHTTPError",
    # Host integration
    "TOOL_DEFINITIONS",
    "ToolExecutionResult",
    "execute_tool",
    "get_tool_schemas",
    # Version
    "__version__",
]
