#!/usr/bin/env python3
"""
Command line entry point exposing the Browserless client to host tools.

Configuration is read from BROWSERLESS_* environment variables.

Examples:
    python -m browserless_client tools --format anthropic
    python -m browserless_client call generate_pdf --args '{"url": "https://example.com"}' --output-dir out
    python -m browserless_client serve < requests.jsonl
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, Optional, TextIO

from browserless_client.client import BrowserlessClient, setup_logging
from browserless_client.config import config_from_env
from browserless_client.core.errors import BrowserlessConfigError
from browserless_client.host.tools import execute_tool, get_tool_schemas

logger = logging.getLogger("browserless_client")


def _write_line(stream: TextIO, message: Dict[str, Any]) -> None:
    stream.write(json.dumps(message) + "\n")
    stream.flush()


async def handle_request_line(
    client: BrowserlessClient,
    line: str,
    *,
    output_dir: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Execute one serve-mode request.

    Request format:
        {"id": ..., "tool": "name", "arguments": {...}}

    Response format:
        {"id": ..., "result": {envelope}} or {"id": ..., "error": "message"}
    """
    try:
        request = json.loads(line)
    except json.JSONDecodeError as e:
        return {"id": None, "error": f"Invalid JSON: {e}"}

    if not isinstance(request, dict):
        return {"id": None, "error": "Request must be a JSON object"}

    request_id = request.get("id")
    tool_name = request.get("tool")
    if not tool_name:
        return {"id": request_id, "error": "Missing 'tool' field"}

    result = await execute_tool(client, tool_name, request.get("arguments") or {})
    if result.response is None:
        return {"id": request_id, "error": result.error}
    try:
        encoded = result.to_dict(output_dir=output_dir)
    except OSError as e:
        logger.warning("Could not write tool output", extra={"tool": tool_name, "output_dir": output_dir})
        return {"id": request_id, "error": f"Could not write output: {e}"}
    return {"id": request_id, "result": encoded}


async def serve(
    client: BrowserlessClient,
    stdin: TextIO,
    stdout: TextIO,
    *,
    output_dir: Optional[str] = None,
) -> None:
    """Answer newline-delimited JSON requests until stdin closes."""
    logger.info("Serving tool requests on stdin")
    while True:
        line = await asyncio.to_thread(stdin.readline)
        if not line:
            break
        line = line.strip()
        if not line:
            continue
        response = await handle_request_line(client, line, output_dir=output_dir)
        _write_line(stdout, response)


async def _run(args: argparse.Namespace) -> int:
    config = config_from_env()
    async with BrowserlessClient(config) as client:
        if args.command == "serve":
            await serve(client, sys.stdin, sys.stdout, output_dir=args.output_dir)
            return 0

        try:
            tool_args = json.loads(args.args) if args.args else {}
        except json.JSONDecodeError as e:
            print(f"Invalid --args JSON: {e}", file=sys.stderr)
            return 2

        result = await execute_tool(client, args.tool, tool_args)
        try:
            encoded = result.to_dict(output_dir=args.output_dir)
        except OSError as e:
            print(f"Could not write output: {e}", file=sys.stderr)
            return 1
        print(json.dumps(encoded, indent=2))
        return 0 if result.success else 1


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="browserless_client",
        description="Expose a remote Browserless instance as host tools.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging on stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    tools_parser = subparsers.add_parser("tools", help="Print the tool schemas as JSON.")
    tools_parser.add_argument(
        "--format",
        choices=["openai", "anthropic"],
        default="openai",
        help="Schema flavour (default: openai).",
    )

    call_parser = subparsers.add_parser("call", help="Run a single tool and print its result.")
    call_parser.add_argument("tool", help="Tool name, e.g. generate_pdf.")
    call_parser.add_argument("--args", default=None, help="Tool arguments as a JSON object.")
    call_parser.add_argument(
        "--output-dir",
        default=None,
        help="Write PDF and screenshot files here instead of inlining them as base64.",
    )

    serve_parser = subparsers.add_parser("serve", help="Answer JSON-lines tool requests on stdin.")
    serve_parser.add_argument(
        "--output-dir",
        default=None,
        help="Write PDF and screenshot files here instead of inlining them as base64.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(level=logging.WARNING, debug=args.debug)

    if args.command == "tools":
        print(json.dumps(get_tool_schemas(format=args.format), indent=2))
        return 0

    try:
        return asyncio.run(_run(args))
    except BrowserlessConfigError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
