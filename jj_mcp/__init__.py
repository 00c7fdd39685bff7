"""Jujutsu (jj) version control exposed as MCP tools and resources.

Importing the package stays cheap; the FastMCP server is assembled by
``jj_mcp.server`` on first import of that module.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
