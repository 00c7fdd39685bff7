"""Entry point for the Jujutsu MCP server.

``python main.py`` serves the configured transport (stdio by default).
``uvicorn main:app`` serves streamable HTTP at ``/mcp`` plus ``/healthz``.
"""

from __future__ import annotations

import os
import time
from typing import Any

import uvicorn
from starlette.middleware.trustedhost import TrustedHostMiddleware

from jj_mcp import config, server
from jj_mcp.http_routes.healthz import register_healthz_route
from jj_mcp.mcp_server.context import REQUEST_PATH, REQUEST_RECEIVED_AT, REQUEST_SESSION_ID

LOGGER = config.BASE_LOGGER.getChild("main")

SUPPORTED_TRANSPORTS = ("stdio", "sse", "streamable-http")


class _RequestContextMiddleware:
    """ASGI middleware that records per-request identifiers for logging.

    The streamable HTTP transport carries the session in the
    ``mcp-session-id`` header. Values land in contextvars read by the tool
    instrumentation. BaseHTTPMiddleware is avoided to keep streaming intact.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        REQUEST_PATH.set(scope.get("path", "") or "")
        REQUEST_RECEIVED_AT.set(time.time())
        REQUEST_SESSION_ID.set(None)

        for key, value in scope.get("headers") or []:
            if key.lower() == b"mcp-session-id":
                REQUEST_SESSION_ID.set(value.decode("latin-1"))
                break

        return await self.app(scope, receive, send)


def _allowed_hosts() -> list[str]:
    allowed_hosts_env = os.getenv("ALLOWED_HOSTS")
    if allowed_hosts_env:
        hosts = [host.strip() for host in allowed_hosts_env.split(",") if host.strip()]
        if hosts:
            return hosts
    return ["*"]


def _configure_trusted_hosts(app_instance) -> None:
    app_instance.user_middleware = [
        middleware for middleware in app_instance.user_middleware if middleware.cls is not TrustedHostMiddleware
    ]
    app_instance.middleware_stack = None
    app_instance.add_middleware(TrustedHostMiddleware, allowed_hosts=_allowed_hosts())


def build_app() -> Any:
    """Build the Starlette app for the streamable HTTP transport."""

    app_instance = server.mcp.streamable_http_app()
    _configure_trusted_hosts(app_instance)
    app_instance.add_middleware(_RequestContextMiddleware)
    register_healthz_route(app_instance, server.REGISTRY)
    return app_instance


app = build_app()


def main(transport: str | None = None) -> None:
    selected = (transport or config.MCP_TRANSPORT).strip().lower()
    if selected not in SUPPORTED_TRANSPORTS:
        raise ValueError(
            f"Unsupported MCP transport {selected!r}; expected one of {', '.join(SUPPORTED_TRANSPORTS)}"
        )

    LOGGER.chat(
        "Starting Jujutsu MCP server",
        extra={"event": "server_start", "transport": selected, "jj_binary": config.JJ_BINARY},
    )

    if selected == "streamable-http":
        uvicorn.run(app, host=config.HTTP_HOST, port=config.HTTP_PORT, log_config=None)
        return

    server.mcp.run(transport=selected)


__all__ = [
    "SUPPORTED_TRANSPORTS",
    "app",
    "build_app",
    "main",
]


if __name__ == "__main__":
    main()
