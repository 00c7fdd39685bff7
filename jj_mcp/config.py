"""Configuration and logging helpers for the Jujutsu MCP server."""

from __future__ import annotations

import logging
import os
import time

from jj_mcp.utils import _env_flag, _env_int

# Custom log levels
# ------------------------------------------------------------------------------
#
# CHAT: user-facing progress messages.
# DETAILED: verbose operational logging that is more detailed than INFO but less
# noisy than full DEBUG.

DETAILED_LEVEL = 15
CHAT_LEVEL = 25


def _install_custom_log_levels() -> None:
    if not hasattr(logging, "DETAILED"):
        logging.addLevelName(DETAILED_LEVEL, "DETAILED")
        setattr(logging, "DETAILED", DETAILED_LEVEL)

    if not hasattr(logging, "CHAT"):
        logging.addLevelName(CHAT_LEVEL, "CHAT")
        setattr(logging, "CHAT", CHAT_LEVEL)

    # Logger helpers: logger.chat(...), logger.detailed(...)
    if not hasattr(logging.Logger, "detailed"):
        def detailed(self: logging.Logger, msg, *args, **kwargs):
            if self.isEnabledFor(DETAILED_LEVEL):
                self._log(DETAILED_LEVEL, msg, args, **kwargs)
        logging.Logger.detailed = detailed  # type: ignore[attr-defined]

    if not hasattr(logging.Logger, "chat"):
        def chat(self: logging.Logger, msg, *args, **kwargs):
            if self.isEnabledFor(CHAT_LEVEL):
                self._log(CHAT_LEVEL, msg, args, **kwargs)
        logging.Logger.chat = chat  # type: ignore[attr-defined]


def _resolve_log_level(level_name: str | None) -> int:
    if not level_name:
        return logging.INFO

    name = str(level_name).strip().upper()
    if not name:
        return logging.INFO

    # Numeric levels are allowed.
    if name.lstrip("-").isdigit():
        return int(name)

    if name == "DETAILED":
        return DETAILED_LEVEL
    if name == "CHAT":
        return CHAT_LEVEL

    level = getattr(logging, name, None)
    return level if isinstance(level, int) else logging.INFO


_install_custom_log_levels()

# Configuration and globals
# ------------------------------------------------------------------------------

# VCS binary spawned for every operation.
JJ_BINARY = os.environ.get("JJ_BINARY", "jj").strip() or "jj"

# Per-command timeout. Zero or a negative value disables the timeout.
COMMAND_TIMEOUT_SECONDS = _env_int("JJ_MCP_COMMAND_TIMEOUT_SECONDS", 300)

# When enabled, the rendered command line is handed to a shell and free-text
# arguments travel as base64 decode fragments. By default argv is spawned
# directly and no shell is involved.
SHELL_MODE = _env_flag("JJ_MCP_SHELL_MODE", False)

# Working directory for views that are not scoped to a caller-supplied path.
DEFAULT_REPOSITORY = os.path.abspath(
    os.environ.get("JJ_MCP_DEFAULT_REPOSITORY", "").strip() or os.getcwd()
)

INFO_LOG_LIMIT = _env_int("JJ_MCP_INFO_LOG_LIMIT", 10)

# Upper bounds for captured stdout/stderr. Zero disables truncation.
TOOL_STDOUT_MAX_CHARS = _env_int("TOOL_STDOUT_MAX_CHARS", 0)
TOOL_STDERR_MAX_CHARS = _env_int("TOOL_STDERR_MAX_CHARS", 0)

MCP_TRANSPORT = os.environ.get("MCP_TRANSPORT", "stdio").strip().lower() or "stdio"
HTTP_HOST = (os.getenv("FASTMCP_HOST") or os.getenv("HOST") or "127.0.0.1").strip()
HTTP_PORT = _env_int("PORT", 8000)

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_STYLE = os.environ.get("LOG_STYLE", "color").lower()

# Default to a compact, scannable format.
LOG_FORMAT = os.environ.get(
    "LOG_FORMAT",
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)


class _ColorFormatter(logging.Formatter):
    """Level-colored formatter for console logs."""

    _C = {
        "DEBUG": "\x1b[36m",  # cyan
        "DETAILED": "\x1b[36m",  # cyan
        "INFO": "\x1b[32m",  # green
        "CHAT": "\x1b[34m",  # blue
        "WARNING": "\x1b[33m",  # yellow
        "ERROR": "\x1b[31m",  # red
        "CRITICAL": "\x1b[35m",  # magenta
        "RESET": "\x1b[0m",
    }

    def __init__(self, fmt: str, *, use_color: bool) -> None:
        super().__init__(fmt)
        self._use_color = bool(use_color)

    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - formatting
        levelname = record.levelname
        if self._use_color and levelname in self._C:
            record.levelname = f"{self._C[levelname]}{levelname}{self._C['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def _configure_logging() -> None:
    # Avoid reconfiguring during module reloads.
    root = logging.getLogger()
    if getattr(root, "_jj_mcp_configured", False):
        return

    use_color = LOG_STYLE in {"color", "ansi", "colored"}

    # StreamHandler writes to stderr; stdout belongs to the stdio transport.
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(_ColorFormatter(LOG_FORMAT, use_color=use_color))

    logging.basicConfig(
        level=_resolve_log_level(LOG_LEVEL),
        handlers=[console_handler],
        force=True,
    )

    for noisy in (
        "uvicorn.access",
        "mcp",
        "mcp.server",
        "mcp.server.lowlevel.server",
    ):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    setattr(root, "_jj_mcp_configured", True)


_configure_logging()

BASE_LOGGER = logging.getLogger("jj_mcp")
TOOLS_LOGGER = logging.getLogger("jj_mcp.tools")
EXECUTOR_LOGGER = logging.getLogger("jj_mcp.executor")

SERVER_START_TIME = time.time()

__all__ = [
    "BASE_LOGGER",
    "CHAT_LEVEL",
    "COMMAND_TIMEOUT_SECONDS",
    "DEFAULT_REPOSITORY",
    "DETAILED_LEVEL",
    "EXECUTOR_LOGGER",
    "HTTP_HOST",
    "HTTP_PORT",
    "INFO_LOG_LIMIT",
    "JJ_BINARY",
    "MCP_TRANSPORT",
    "SERVER_START_TIME",
    "SHELL_MODE",
    "TOOLS_LOGGER",
    "TOOL_STDERR_MAX_CHARS",
    "TOOL_STDOUT_MAX_CHARS",
]
