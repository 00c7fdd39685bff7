"""Utility helpers shared by the Jujutsu MCP modules."""

from __future__ import annotations

import os


def _env_flag(name: str, default: bool = False) -> bool:
    """Return True when an environment variable is set to a truthy value."""

    val = os.environ.get(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _truncate(value: str, limit: int) -> tuple[str, bool]:
    """Clip ``value`` to ``limit`` characters; a non-positive limit disables clipping."""

    if limit and limit > 0 and len(value) > limit:
        return value[:limit], True
    return value, False


__all__ = [
    "_env_flag",
    "_env_int",
    "_truncate",
]
