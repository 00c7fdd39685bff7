"""Bookmark management: list/create/delete, set, move."""

from typing import Annotated, Literal, Optional

from pydantic import Field

from jj_mcp.command_line import CommandLine
from jj_mcp.exceptions import OperationInputError
from jj_mcp.operations._shared import ActionSpec, WorkingDirectory, run_jj

AllowBackwards = Annotated[
    bool, Field(description="Allow moving the bookmark backwards or sideways.")
]


async def jj_bookmark(
    action: Annotated[
        Literal["list", "create", "delete"],
        Field(description="Action to perform on bookmarks: 'list', 'create', or 'delete'."),
    ],
    working_directory: WorkingDirectory,
    name: Annotated[
        Optional[str],
        Field(description="Name of the bookmark to create or delete. Required for 'create' and 'delete'."),
    ] = None,
    revision_id: Annotated[
        Optional[str], Field(description="The revision to bookmark (used by 'create').")
    ] = None,
) -> str:
    """Manage bookmarks."""
    if action == "list":
        command = CommandLine("bookmark", "list")
    elif action == "create":
        if not name:
            raise OperationInputError(
                "jj_bookmark", "Error: Bookmark name is required for creating a bookmark.", field="name"
            )
        command = CommandLine("bookmark", "create", name).add_option("-r", revision_id)
    elif action == "delete":
        if not name:
            raise OperationInputError(
                "jj_bookmark", "Error: Bookmark name is required for deleting a bookmark.", field="name"
            )
        command = CommandLine("bookmark", "delete", name)
    else:
        raise OperationInputError("jj_bookmark", "Error: Invalid bookmark action.", field="action")
    return await run_jj("jj_bookmark", command, working_directory)


async def jj_bookmark_set(
    names: Annotated[list[str], Field(min_length=1, description="The bookmarks to update.")],
    working_directory: WorkingDirectory,
    revision_id: Annotated[Optional[str], Field(description="The bookmark's target revision.")] = None,
    allow_backwards: AllowBackwards = False,
) -> str:
    """Create or update a bookmark to point to a certain commit."""
    command = (
        CommandLine("bookmark", "set")
        .add_positionals(names)
        .add_option("-r", revision_id)
        .add_flag("-B", allow_backwards)
    )
    return await run_jj("jj_bookmark_set", command, working_directory)


async def jj_bookmark_move(
    to: Annotated[str, Field(min_length=1, description="Move bookmarks to this revision.")],
    working_directory: WorkingDirectory,
    names: Annotated[
        Optional[list[str]], Field(description="Move bookmarks matching the given name patterns.")
    ] = None,
    from_revisions: Annotated[
        Optional[list[str]], Field(description="Move bookmarks from the given revisions.")
    ] = None,
    allow_backwards: AllowBackwards = False,
) -> str:
    """Move existing bookmarks to a target revision."""
    command = (
        CommandLine("bookmark", "move")
        .add_positionals(names)
        .add_repeated("-f", from_revisions)
        .add("-t", to)
        .add_flag("-B", allow_backwards)
    )
    return await run_jj("jj_bookmark_move", command, working_directory)


ACTIONS = (
    ActionSpec("jj_bookmark", "Jujutsu Bookmark", "Manage bookmarks (list, create, delete).", jj_bookmark),
    ActionSpec("jj_bookmark_set", "Jujutsu Bookmark Set",
               "Create or update a bookmark to point to a certain commit.", jj_bookmark_set),
    ActionSpec("jj_bookmark_move", "Jujutsu Bookmark Move",
               "Move existing bookmarks to a target revision.", jj_bookmark_move),
)

__all__ = [
    "ACTIONS",
    "jj_bookmark",
    "jj_bookmark_move",
    "jj_bookmark_set",
]
