"""History-rewriting operations: squash and rebase."""

from typing import Annotated, Optional

from pydantic import Field

from jj_mcp.command_line import CommandLine
from jj_mcp.exceptions import OperationInputError
from jj_mcp.operations._shared import ActionSpec, WorkingDirectory, run_jj


async def jj_squash(
    message: Annotated[
        str, Field(description="The description to use for squashed revision (don't open editor).")
    ],
    working_directory: WorkingDirectory,
    revision: Annotated[
        Optional[str], Field(description="Revision to squash into its parent (default: @).")
    ] = None,
    into: Annotated[Optional[str], Field(description="Revision to squash into (default: @).")] = None,
    from_revisions: Annotated[
        Optional[list[str]], Field(description="Revision(s) to squash from (default: @).")
    ] = None,
    filesets: Annotated[
        Optional[list[str]], Field(description="Move only changes to these paths (instead of all paths).")
    ] = None,
    tool: Annotated[
        Optional[str], Field(description="Specify diff editor to be used (implies --interactive).")
    ] = None,
    keep_emptied: Annotated[bool, Field(description="The source revision will not be abandoned.")] = False,
    use_destination_message: Annotated[
        bool,
        Field(
            description=(
                "Use the description of the destination revision and discard the "
                "description(s) of the source revision(s)."
            )
        ),
    ] = False,
) -> str:
    """Move changes from a revision into another revision."""
    command = (
        CommandLine("squash")
        .add_option("-r", revision)
        .add_option("-t", into)
        .add_repeated("-f", from_revisions)
        .add_positionals(filesets)
        .add_option("--tool", tool)
    )
    if message:
        command.add_message("-m", message)
    command.add_flag("-k", keep_emptied).add_flag("-u", use_destination_message)
    return await run_jj("jj_squash", command, working_directory)


async def jj_rebase(
    working_directory: WorkingDirectory,
    source: Annotated[
        Optional[list[str]],
        Field(description="Rebase specified revision(s) together with their trees of descendants."),
    ] = None,
    branch: Annotated[
        Optional[list[str]],
        Field(description="Rebase the whole branch relative to destination's ancestors."),
    ] = None,
    revisions: Annotated[
        Optional[list[str]],
        Field(description="Rebase the given revisions, rebasing descendants onto this revision's parent(s)."),
    ] = None,
    destination: Annotated[
        Optional[list[str]],
        Field(description="The revision(s) to rebase onto (several create a merge commit)."),
    ] = None,
    insert_before: Annotated[
        Optional[list[str]],
        Field(description="The revision(s) to insert before (several create a merge commit)."),
    ] = None,
    insert_after: Annotated[
        Optional[list[str]],
        Field(description="The revision(s) to insert after (several create a merge commit)."),
    ] = None,
) -> str:
    """Move revisions to different parent(s)."""
    if not any((source, branch, revisions, destination, insert_before, insert_after)):
        raise OperationInputError(
            "jj_rebase",
            "Error: At least one of --source, --branch, --revisions, --destination, "
            "--insert-before, or --insert-after must be provided.",
        )

    command = (
        CommandLine("rebase")
        .add_repeated("-s", source)
        .add_repeated("-b", branch)
        .add_repeated("-r", revisions)
        .add_repeated("-d", destination)
        .add_repeated("--insert-before", insert_before)
        .add_repeated("--insert-after", insert_after)
    )
    return await run_jj("jj_rebase", command, working_directory)


ACTIONS = (
    ActionSpec("jj_squash", "Jujutsu Squash", "Move changes from a revision into another revision.",
               jj_squash, destructive=True),
    ActionSpec("jj_rebase", "Jujutsu Rebase", "Move revisions to different parent(s).",
               jj_rebase, destructive=True),
)

__all__ = [
    "ACTIONS",
    "jj_rebase",
    "jj_squash",
]
