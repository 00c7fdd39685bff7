"""
Server instance + request context.

Goals:
- Own the single FastMCP instance that operations are published into.
- Carry per-request correlation ids for logs (set by HTTP middleware).
"""

from __future__ import annotations

import time
from contextvars import ContextVar
from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from jj_mcp import config

SERVER_NAME = "jujutsu"

SERVER_INSTRUCTIONS = (
    "Tools for the Jujutsu (jj) version control system. Every tool runs one jj "
    "command in `working_directory`, which must be an absolute path inside a jj "
    "repository, and returns the command output as text."
)


def create_mcp() -> FastMCP:
    return FastMCP(
        SERVER_NAME,
        instructions=SERVER_INSTRUCTIONS,
        host=config.HTTP_HOST,
        port=config.HTTP_PORT,
    )


# -----------------------------------------------------------------------------
# Correlation ids (set these in request middleware / entrypoints)
# -----------------------------------------------------------------------------

REQUEST_SESSION_ID: ContextVar[Optional[str]] = ContextVar("REQUEST_SESSION_ID", default=None)
REQUEST_PATH: ContextVar[Optional[str]] = ContextVar("REQUEST_PATH", default=None)
REQUEST_RECEIVED_AT: ContextVar[Optional[float]] = ContextVar("REQUEST_RECEIVED_AT", default=None)


def get_request_context() -> Dict[str, Any]:
    """Small, stable context blob suitable for logs (avoid secrets)."""
    return {
        "session_id": REQUEST_SESSION_ID.get(),
        "path": REQUEST_PATH.get(),
        "received_at": REQUEST_RECEIVED_AT.get(),
        "ts": time.time(),
    }


__all__ = [
    "REQUEST_PATH",
    "REQUEST_RECEIVED_AT",
    "REQUEST_SESSION_ID",
    "SERVER_INSTRUCTIONS",
    "SERVER_NAME",
    "create_mcp",
    "get_request_context",
]
