from __future__ import annotations

import platform
import shutil
import sys
import time
from collections.abc import Callable
from typing import Any

from starlette.requests import Request
from starlette.responses import JSONResponse

from jj_mcp import __version__, config


def _build_health_payload(registry: Any) -> dict[str, Any]:
    binary_path = shutil.which(config.JJ_BINARY)
    uptime_seconds = max(0, int(time.time() - config.SERVER_START_TIME))

    return {
        "status": "ok" if binary_path else "degraded",
        "version": __version__,
        "uptime_seconds": uptime_seconds,
        "jj": {
            "binary": config.JJ_BINARY,
            "path": binary_path,
            "shell_mode": config.SHELL_MODE,
        },
        "operations": {
            "actions": len(registry.actions),
            "views": len(registry.views),
        },
        "runtime": {
            "python": sys.version.split()[0],
            "platform": platform.platform(),
        },
    }


def build_healthz_endpoint(registry: Any) -> Callable[[Request], Any]:
    async def _endpoint(_: Request) -> JSONResponse:
        return JSONResponse(_build_health_payload(registry))

    return _endpoint


def register_healthz_route(app: Any, registry: Any) -> None:
    """Register the /healthz route on the ASGI app."""

    app.add_route("/healthz", build_healthz_endpoint(registry), methods=["GET"])


__all__ = ["register_healthz_route"]
