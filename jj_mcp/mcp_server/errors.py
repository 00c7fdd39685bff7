"""Utilities for producing consistent tool-failure payloads.

These payloads feed the telemetry log. Callers of an operation never see
them; they see the operation's text result or its error result.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import jsonschema

from jj_mcp.exceptions import OperationInputError, UnknownOperationError


def _summarize_exception(exc: BaseException) -> str:
    """Create a short human-readable message."""
    if isinstance(exc, jsonschema.ValidationError):
        path = list(exc.path)
        base_message = exc.message or exc.__class__.__name__
        if path:
            path_display = " → ".join(str(p) for p in path)
            return f"{base_message} (at {path_display})"
        return base_message

    return str(exc) or exc.__class__.__name__


def _classify_category(exc: BaseException, message: str) -> str:
    """Best-effort category for log filtering."""
    if isinstance(exc, (jsonschema.ValidationError, OperationInputError, ValueError, TypeError)):
        return "validation"

    if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
        return "timeout"

    if isinstance(exc, UnknownOperationError):
        return "not_found"

    lowered = (message or "").lower()
    if "timeout" in lowered or "timed out" in lowered:
        return "timeout"

    return "unknown"


def _structured_tool_error(
    exc: BaseException, *, context: str, field: Optional[str] = None
) -> Dict[str, Any]:
    """Build a serializable payload describing ``exc``."""
    message = _summarize_exception(exc)
    category = _classify_category(exc, message)

    payload: Dict[str, Any] = {
        "error": {
            "error": exc.__class__.__name__,
            "message": message,
            "context": context,
            "category": category,
        }
    }

    field = field or getattr(exc, "field", None)
    if field:
        payload["error"]["field"] = field

    return payload


__all__ = ["_structured_tool_error"]
