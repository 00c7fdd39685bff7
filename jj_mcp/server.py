"""Shared server setup for the Jujutsu MCP.

This module is the stable public import surface: importing it builds the
operation registry once and publishes it into the FastMCP instance.
Implementation lives under `jj_mcp.operations.*` and `jj_mcp.mcp_server.*`.
"""

from __future__ import annotations

from jj_mcp.mcp_server.context import create_mcp
from jj_mcp.registry import Registry, build_registry

REGISTRY: Registry = build_registry()

mcp = create_mcp()
REGISTRY.publish(mcp)

__all__ = [
    "REGISTRY",
    "mcp",
]
