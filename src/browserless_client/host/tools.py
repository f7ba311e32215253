"""
Host Tool Definitions - JSON schemas and executor for host tool calling.

This module provides:
1. Tool schemas compatible with OpenAI and Anthropic formats
2. A tool executor that maps tool calls to BrowserlessClient methods
"""
from __future__ import annotations

import base64
import os
from dataclasses import dataclass
from typing import Any, Callable, Coroutine, Dict, List, Literal, Optional, Tuple

from browserless_client.client import BrowserlessClient
from browserless_client.core.models import (
    BrowserlessResponse,
    PdfResponse,
    ScreenshotResponse,
    WebSocketOptions,
    WebSocketResponse,
)


# =============================================================================
# Tool Schemas
# =============================================================================

_PARAMS_PROPERTY = {
    "type": "object",
    "description": "Extra query parameters for the request (e.g. launch, blockAds, timeout). The token is added automatically.",
}

_GOTO_OPTIONS_PROPERTY = {
    "type": "object",
    "description": "Navigation options such as waitUntil and timeout",
}


def _page_tool(name: str, description: str, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    properties: Dict[str, Any] = {
        "url": {
            "type": "string",
            "description": "URL of the page to load (must include http:// or https://)"
        },
        "html": {
            "type": "string",
            "description": "Raw HTML to render instead of loading a URL"
        },
        "gotoOptions": _GOTO_OPTIONS_PROPERTY,
    }
    properties.update(extra or {})
    properties["params"] = _PARAMS_PROPERTY
    return {
        "name": name,
        "description": description,
        "parameters": {
            "type": "object",
            "properties": properties,
            "required": []
        }
    }


def _script_tool(name: str, description: str) -> Dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "parameters": {
            "type": "object",
            "properties": {
                "code": {
                    "type": "string",
                    "description": "JavaScript source exporting an async function that receives { page, context }"
                },
                "context": {
                    "type": "object",
                    "description": "Values passed to the function as context"
                },
                "params": _PARAMS_PROPERTY,
            },
            "required": ["code"]
        }
    }


def _introspection_tool(name: str, description: str) -> Dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "parameters": {
            "type": "object",
            "properties": {},
            "required": []
        }
    }


TOOL_DEFINITIONS = {
    "generate_pdf": _page_tool(
        "generate_pdf",
        "Render a webpage or HTML document to PDF.",
        {
            "options": {
                "type": "object",
                "description": "PDF options: format, landscape, printBackground, margin, scale, ..."
            },
        },
    ),
    "take_screenshot": _page_tool(
        "take_screenshot",
        "Capture a screenshot of a webpage or HTML document.",
        {
            "options": {
                "type": "object",
                "description": "Screenshot options: type (png, jpeg, webp), fullPage, quality, clip, ..."
            },
        },
    ),
    "get_content": _page_tool(
        "get_content",
        "Return the fully rendered HTML of a webpage after JavaScript has run.",
    ),
    "execute_function": _script_tool(
        "execute_function",
        "Execute custom JavaScript in a remote browser page and return its result.",
    ),
    "download_files": _script_tool(
        "download_files",
        "Run a script that triggers file downloads in the remote browser and return the downloaded data.",
    ),
    "export_page": _page_tool(
        "export_page",
        "Export a webpage together with its resources.",
        {
            "includeResources": {
                "type": "boolean",
                "description": "If true, bundle images, stylesheets and scripts with the page"
            },
        },
    ),
    "run_performance_audit": {
        "name": "run_performance_audit",
        "description": "Run a Lighthouse performance audit against a webpage.",
        "parameters": {
            "type": "object",
            "properties": {
                "url": {
                    "type": "string",
                    "description": "URL of the page to audit"
                },
                "config": {
                    "type": "object",
                    "description": "Lighthouse configuration (categories, budgets, ...)"
                },
                "params": _PARAMS_PROPERTY,
            },
            "required": ["url"]
        }
    },
    "unblock": _page_tool(
        "unblock",
        "Load a page past bot detection and return any of its content, cookies, screenshot or a browser endpoint.",
        {
            "content": {"type": "boolean", "description": "Return the page HTML"},
            "cookies": {"type": "boolean", "description": "Return the page cookies"},
            "screenshot": {"type": "boolean", "description": "Return a base64 screenshot"},
            "browserWSEndpoint": {"type": "boolean", "description": "Keep the browser open and return its endpoint"},
            "ttl": {"type": "integer", "description": "Milliseconds to keep the browser alive"},
        },
    ),
    "execute_browser_ql": {
        "name": "execute_browser_ql",
        "description": "Execute a BrowserQL (GraphQL) query against a remote Chromium browser.",
        "parameters": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "The BrowserQL query or mutation"
                },
                "variables": {
                    "type": "object",
                    "description": "Variables referenced by the query"
                },
                "operationName": {
                    "type": "string",
                    "description": "Operation to run when the document defines several"
                },
                "params": _PARAMS_PROPERTY,
            },
            "required": ["query"]
        }
    },
    "create_websocket_connection": {
        "name": "create_websocket_connection",
        "description": "Get a WebSocket endpoint for Puppeteer or Playwright and check that it is reachable.",
        "parameters": {
            "type": "object",
            "properties": {
                "browser": {
                    "type": "string",
                    "enum": ["chromium", "chrome", "firefox", "webkit"],
                    "description": "Browser to connect to",
                    "default": "chromium"
                },
                "library": {
                    "type": "string",
                    "enum": ["puppeteer", "playwright"],
                    "description": "Automation library that will use the endpoint",
                    "default": "puppeteer"
                }
            },
            "required": []
        }
    },
    "get_health": _introspection_tool("get_health", "Get the health status of the Browserless instance."),
    "get_sessions": _introspection_tool("get_sessions", "List the active browser sessions."),
    "get_config": _introspection_tool("get_config", "Get the configuration of the Browserless instance."),
    "get_metrics": _introspection_tool("get_metrics", "Get usage metrics of the Browserless instance."),
}


def get_tool_schemas(
    format: Literal["openai", "anthropic"] = "openai",
    include_tools: Optional[List[str]] = None,
) -> List[Dict[str, Any]]:
    """
    Get Browserless tool schemas in the specified format.

    Args:
        format: "openai" wraps each tool as a function, "anthropic" uses input_schema.
        include_tools: Tool names to include, in order. If None, includes all tools.

    Returns:
        List of tool schema dictionaries.

    Raises:
        ValueError: If the format or any requested tool name is unknown.
    """
    if format not in ("openai", "anthropic"):
        raise ValueError(f"Unknown schema format: {format}")

    names = list(TOOL_DEFINITIONS) if include_tools is None else list(include_tools)
    unknown = [name for name in names if name not in TOOL_DEFINITIONS]
    if unknown:
        raise ValueError(f"Unknown tool: {', '.join(unknown)}")

    schemas = []
    for name in names:
        tool = TOOL_DEFINITIONS[name]
        if format == "openai":
            schemas.append({
                "type": "function",
                "function": {
                    "name": tool["name"],
                    "description": tool["description"],
                    "parameters": tool["parameters"],
                },
            })
        else:
            schemas.append({
                "name": tool["name"],
                "description": tool["description"],
                "input_schema": tool["parameters"],
            })
    return schemas


# =============================================================================
# Tool Executor
# =============================================================================

def _unique_path(output_dir: str, filename: str) -> str:
    """Pick a path in output_dir that does not collide with an existing file."""
    stem, ext = os.path.splitext(filename)
    path = os.path.join(output_dir, filename)
    counter = 1
    while os.path.exists(path):
        path = os.path.join(output_dir, f"{stem}-{counter}{ext}")
        counter += 1
    return path


def _encode_binary(
    content: bytes,
    filename: str,
    output_dir: Optional[str],
) -> Dict[str, Any]:
    encoded: Dict[str, Any] = {"filename": filename, "size": len(content)}
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
        path = _unique_path(output_dir, filename)
        with open(path, "xb") as f:
            f.write(content)
        encoded["filename"] = os.path.basename(path)
        encoded["path"] = path
    else:
        encoded["base64"] = base64.b64encode(content).decode("ascii")
    return encoded


@dataclass
class ToolExecutionResult:
    """Result of executing a tool."""

    success: bool
    tool_name: str
    response: Optional[BrowserlessResponse[Any]] = None
    error: Optional[str] = None

    def to_dict(self, output_dir: Optional[str] = None) -> Dict[str, Any]:
        """
        Convert to a JSON-safe envelope.

        PDF and screenshot bytes are written to output_dir when given,
        otherwise they are base64-encoded inline. The directory is created
        if missing and existing files are never overwritten.

        Raises:
            OSError: If the output file cannot be written.
        """
        if self.response is None:
            return {"success": False, "error": self.error or f"{self.tool_name} failed"}

        envelope = self.response.to_dict()
        data = self.response.data
        if isinstance(data, PdfResponse):
            envelope["data"] = _encode_binary(data.pdf, data.filename, output_dir)
        elif isinstance(data, ScreenshotResponse):
            envelope["data"] = _encode_binary(data.image, data.filename, output_dir)
            envelope["data"]["format"] = data.format
        elif isinstance(data, WebSocketResponse):
            envelope["data"] = data.to_dict()
        return envelope

    def to_message(self) -> str:
        """Format as a short human-readable line."""
        if self.response is not None and self.response.success:
            return f"✓ {self.tool_name}"
        error = self.error or (self.response.error if self.response else None)
        status = self.response.status_code if self.response else None
        msg = f"✗ {self.tool_name} failed"
        if status is not None:
            msg += f" (HTTP {status})"
        if error:
            msg += f": {error}"
        return msg


ToolHandler = Callable[[BrowserlessClient, Dict[str, Any]], Coroutine[Any, Any, BrowserlessResponse[Any]]]


def _split_params(args: Dict[str, Any]) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    payload = dict(args)
    params = payload.pop("params", None)
    return payload, params


def _forward(method_name: str) -> ToolHandler:
    """Build a handler passing the arguments through as the request payload."""
    async def handler(client: BrowserlessClient, args: Dict[str, Any]) -> BrowserlessResponse[Any]:
        payload, params = _split_params(args)
        method = getattr(client, method_name)
        return await method(payload, params=params)
    return handler


async def _handle_websocket(client: BrowserlessClient, args: Dict[str, Any]) -> BrowserlessResponse[Any]:
    options = WebSocketOptions(
        browser=args.get("browser", "chromium"),
        library=args.get("library", "puppeteer"),
    )
    return await client.create_websocket_connection(options)


def _introspect(method_name: str) -> ToolHandler:
    async def handler(client: BrowserlessClient, args: Dict[str, Any]) -> BrowserlessResponse[Any]:
        return await getattr(client, method_name)()
    return handler


TOOL_HANDLERS: Dict[str, ToolHandler] = {
    "generate_pdf": _forward("generate_pdf"),
    "take_screenshot": _forward("take_screenshot"),
    "get_content": _forward("get_content"),
    "execute_function": _forward("execute_function"),
    "download_files": _forward("download_files"),
    "export_page": _forward("export_page"),
    "run_performance_audit": _forward("run_performance_audit"),
    "unblock": _forward("unblock"),
    "execute_browser_ql": _forward("execute_browser_ql"),
    "create_websocket_connection": _handle_websocket,
    "get_health": _introspect("get_health"),
    "get_sessions": _introspect("get_sessions"),
    "get_config": _introspect("get_config"),
    "get_metrics": _introspect("get_metrics"),
}


async def execute_tool(
    client: BrowserlessClient,
    tool_name: str,
    tool_args: Optional[Dict[str, Any]] = None,
) -> ToolExecutionResult:
    """
    Execute a tool call against the client.

    Args:
        client: BrowserlessClient instance to execute against.
        tool_name: Name of the tool to execute.
        tool_args: Arguments for the tool.

    Returns:
        ToolExecutionResult with the outcome.
    """
    handler = TOOL_HANDLERS.get(tool_name)
    if handler is None:
        return ToolExecutionResult(False, tool_name, error=f"Unknown tool: {tool_name}")

    args = tool_args or {}
    if not isinstance(args, dict):
        return ToolExecutionResult(False, tool_name, error="Tool arguments must be an object")

    required = TOOL_DEFINITIONS[tool_name]["parameters"]["required"]
    missing = [name for name in required if args.get(name) in (None, "")]
    if missing:
        return ToolExecutionResult(
            False, tool_name, error=f"Missing required parameter: {', '.join(missing)}"
        )

    try:
        response = await handler(client, args)
    except Exception as e:
        return ToolExecutionResult(False, tool_name, error=str(e) or type(e).__name__)
    return ToolExecutionResult(response.success, tool_name, response=response)
