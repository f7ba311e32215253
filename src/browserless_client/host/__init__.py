"""
Host Module - Tool schemas and executor for processes that expose the client.
"""
from browserless_client.host.tools import (
    TOOL_DEFINITIONS,
    ToolExecutionResult,
    execute_tool,
    get_tool_schemas,
)

__all__ = [
    "TOOL_DEFINITIONS",
    "ToolExecutionResult",
    "execute_tool",
    "get_tool_schemas",
]
