"""Custom exception types used across the Jujutsu MCP server."""

from __future__ import annotations

from mcp.server.fastmcp.exceptions import ToolError


class OperationInputError(ToolError):
    """Raised when an operation's input fails validation before any command runs.

    Subclassing ``ToolError`` lets FastMCP report it as an error result
    (``isError: true``) carrying this message, instead of a crash.
    """

    def __init__(self, tool: str, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.tool = tool
        self.field = field
        self.message = message


class UnknownOperationError(LookupError):
    """Raised when dispatching to an operation name or view URI that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown operation: {name!r}")
        self.name = name


class RegistryError(ValueError):
    pass


__all__ = [
    "OperationInputError",
    "RegistryError",
    "UnknownOperationError",
]
