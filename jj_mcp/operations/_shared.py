"""Shared types and helpers for operation definitions.

An operation is a plain async function whose annotated signature is its
input contract. ``ActionSpec`` / ``ViewSpec`` bind that function to the
name, title and metadata it is published under.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Annotated, Any, Awaitable, Callable, Dict, Optional

from pydantic import Field

from jj_mcp import executor
from jj_mcp.command_line import CommandLine
from jj_mcp.exceptions import OperationInputError

# Field contracts reused across operations.
WorkingDirectory = Annotated[
    str,
    Field(min_length=1, description="Absolute path to the repository."),
]
RevisionList = Optional[list[str]]


@dataclass(frozen=True)
class ActionSpec:
    """An invocable tool: may mutate the repository, returns a content envelope."""

    name: str
    title: str
    description: str
    handler: Callable[..., Awaitable[str]]
    read_only: bool = False
    destructive: bool = False

    kind = "action"


@dataclass(frozen=True)
class ViewSpec:
    """A read-only resource addressed by URI, returns a contents envelope."""

    name: str
    uri: str
    title: str
    description: str
    handler: Callable[[], Awaitable[str]]
    mime_type: str = "text/plain"

    kind = "view"


def require_working_directory(tool: str, working_directory: str) -> str:
    """Reject relative or missing working directories before any command runs."""

    if not working_directory or not os.path.isabs(working_directory):
        raise OperationInputError(
            tool,
            f"Error: working_directory must be an absolute path, got {working_directory!r}.",
            field="working_directory",
        )
    if not os.path.isdir(working_directory):
        raise OperationInputError(
            tool,
            f"Error: working_directory does not exist or is not a directory: {working_directory}",
            field="working_directory",
        )
    return os.path.normpath(working_directory)


async def run_jj(tool: str, command: CommandLine, working_directory: str) -> str:
    cwd = require_working_directory(tool, working_directory)
    return await executor.execute_jj(command, cwd)


def text_envelope(text: str, *, is_error: bool = False) -> Dict[str, Any]:
    envelope: Dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if is_error:
        envelope["isError"] = True
    return envelope


def contents_envelope(uri: str, text: str, *, mime_type: str = "text/plain") -> Dict[str, Any]:
    return {"contents": [{"uri": uri, "type": "text", "mimeType": mime_type, "text": text}]}


__all__ = [
    "ActionSpec",
    "RevisionList",
    "ViewSpec",
    "WorkingDirectory",
    "contents_envelope",
    "require_working_directory",
    "run_jj",
    "text_envelope",
]
