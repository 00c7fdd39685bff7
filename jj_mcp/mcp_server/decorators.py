"""Per-call telemetry for operations.

Every Action and View handler runs through ``instrument`` which emits:
- event: tool_call.start | tool_call.ok | tool_call.error
- status: start | ok | error
- tool_name, call_id, duration_ms (for ok/error)
- schema_hash
- arg_keys / arg_count (argument values are never logged)
- request (path + received_at + session_id when available)

Console logs stay one line per event; the structured payload is attached as
a compact JSON string under ``tool_json``.
"""

from __future__ import annotations

import functools
import json
import time
import uuid
from typing import Any, Awaitable, Callable, Mapping, Optional

from jj_mcp.config import DETAILED_LEVEL, TOOLS_LOGGER
from jj_mcp.exceptions import OperationInputError
from jj_mcp.mcp_server.context import get_request_context
from jj_mcp.mcp_server.errors import _structured_tool_error


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        return str(value)


def _minimal_request(req: Any) -> dict[str, Any]:
    if not isinstance(req, Mapping):
        return {}
    out: dict[str, Any] = {}
    for k in ("path", "received_at", "session_id"):
        if req.get(k) is not None:
            out[k] = _jsonable(req.get(k))
    return out


def _log_tool_event(payload: Mapping[str, Any]) -> None:
    """Emit a single readable console line + attach full payload as JSON string."""

    safe = {str(k): _jsonable(v) for k, v in payload.items()}

    status = safe.get("status", "")
    tool = safe.get("tool_name", "")
    dur = safe.get("duration_ms")
    dur_s = f" {int(dur)}ms" if isinstance(dur, (int, float)) else ""
    msg = f"[tool] {tool} {status}{dur_s} ({safe.get('event', 'tool')})"

    tool_json = json.dumps(safe, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    extra = {"event": "tool_json", "tool_json": tool_json, "tool_name": tool, "call_id": safe.get("call_id")}

    if status == "error":
        TOOLS_LOGGER.warning(msg, extra=extra)
    elif status == "start" and TOOLS_LOGGER.isEnabledFor(DETAILED_LEVEL):
        TOOLS_LOGGER.detailed(msg, extra=extra)  # type: ignore[attr-defined]
    elif status != "start":
        TOOLS_LOGGER.info(msg, extra=extra)


def instrument(
    name: str,
    func: Callable[..., Awaitable[str]],
    *,
    schema_hash: Optional[str] = None,
) -> Callable[..., Awaitable[str]]:
    """Wrap an async handler with start/ok/error telemetry.

    ``functools.wraps`` keeps the handler's signature visible, so FastMCP
    derives the same argument model from the wrapper as from the handler.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> str:
        call_id = str(uuid.uuid4())
        start = time.perf_counter()
        arg_keys = sorted(kwargs.keys())

        _log_tool_event(
            {
                "event": "tool_call.start",
                "status": "start",
                "tool_name": name,
                "call_id": call_id,
                "request": _minimal_request(get_request_context()),
                "schema_hash": schema_hash,
                "arg_keys": arg_keys[:32],
                "arg_count": len(arg_keys),
            }
        )

        try:
            result = await func(*args, **kwargs)
        except Exception as exc:
            duration_ms = int((time.perf_counter() - start) * 1000)
            _log_tool_event(
                {
                    "event": "tool_call.error",
                    "status": "error",
                    "phase": "validate" if isinstance(exc, OperationInputError) else "execute",
                    "tool_name": name,
                    "call_id": call_id,
                    "duration_ms": duration_ms,
                    "schema_hash": schema_hash,
                    "error": _structured_tool_error(exc, context=name),
                }
            )
            raise

        duration_ms = int((time.perf_counter() - start) * 1000)
        _log_tool_event(
            {
                "event": "tool_call.ok",
                "status": "ok",
                "tool_name": name,
                "call_id": call_id,
                "duration_ms": duration_ms,
                "schema_hash": schema_hash,
                "result_chars": len(result) if isinstance(result, str) else None,
            }
        )
        return result

    return wrapper


__all__ = ["instrument"]
