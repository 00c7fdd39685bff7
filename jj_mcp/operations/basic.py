"""Everyday working-copy operations: status, log, commit, describe, diff, abandon."""

from typing import Annotated, Optional

from pydantic import Field

from jj_mcp.command_line import CommandLine
from jj_mcp.operations._shared import ActionSpec, WorkingDirectory, run_jj

DEFAULT_LOG_TEMPLATE = "builtin_log_compact_full_description"

BUILTIN_TEMPLATES = (
    "builtin_config_list",
    "builtin_config_list_detailed",
    "builtin_draft_commit_description",
    "builtin_log_comfortable",
    "builtin_log_compact",
    "builtin_log_compact_full_description",
    "builtin_log_detailed",
    "builtin_log_node",
    "builtin_log_node_ascii",
    "builtin_log_oneline",
    "builtin_op_log_comfortable",
    "builtin_op_log_compact",
    "builtin_op_log_node",
    "builtin_op_log_node_ascii",
    "builtin_op_log_oneline",
    "commit_summary_separator",
    "default_commit_description",
    "description_placeholder",
    "email_placeholder",
    "git_format_patch_email_headers",
    "name_placeholder",
)


async def jj_status(working_directory: WorkingDirectory) -> str:
    """Shows the current state of the working copy and the repo."""
    return await run_jj("jj_status", CommandLine("status"), working_directory)


async def jj_log(
    working_directory: WorkingDirectory,
    limit: Annotated[Optional[int], Field(ge=1, description="Maximum number of commits to show.")] = None,
    revisions: Annotated[
        Optional[list[str]], Field(description="Revisions to show history for.")
    ] = None,
    template: Annotated[
        Optional[str],
        Field(
            description=(
                "A template to use for the output. Defaults to "
                f"{DEFAULT_LOG_TEMPLATE}. Builtin templates: [{', '.join(BUILTIN_TEMPLATES)}]"
            )
        ),
    ] = None,
) -> str:
    """Shows the commit history."""
    command = CommandLine("log")
    if limit is not None:
        command.add("--limit", str(limit))
    command.add_repeated("-r", revisions)
    command.add("-T", template or DEFAULT_LOG_TEMPLATE)
    return await run_jj("jj_log", command, working_directory)


async def jj_commit(
    message: Annotated[str, Field(description="Message for the commit.")],
    working_directory: WorkingDirectory,
) -> str:
    """Creates a new commit from the working-copy changes."""
    command = CommandLine("commit").add_message("-m", message)
    return await run_jj("jj_commit", command, working_directory)


async def jj_desc(
    working_directory: WorkingDirectory,
    message: Annotated[
        str, Field(description="New description for the commit. Defaults to empty if not provided.")
    ] = "",
    revision_id: Annotated[
        Optional[str],
        Field(description="The revision to describe. Defaults to the working-copy commit if not provided."),
    ] = None,
) -> str:
    """Amends the description of the specified commit."""
    command = CommandLine("describe").add_message("-m", message)
    if revision_id:
        command.add(revision_id)
    return await run_jj("jj_desc", command, working_directory)


async def jj_diff(
    working_directory: WorkingDirectory,
    revision_id: Annotated[
        str,
        Field(
            min_length=1,
            description="The revision to show the diff for. Defaults to the working copy (@) if not provided.",
        ),
    ] = "@",
    git: Annotated[bool, Field(description="Use git format for the diff output. Enabled by default.")] = True,
) -> str:
    """Shows the diff of the specified revision."""
    command = CommandLine("diff", "-r", revision_id).add_flag("--git", git)
    return await run_jj("jj_diff", command, working_directory)


async def jj_abandon(
    revision_id: Annotated[str, Field(min_length=1, description="The revision to abandon.")],
    working_directory: WorkingDirectory,
) -> str:
    """Abandon the specified revision."""
    return await run_jj("jj_abandon", CommandLine("abandon", "-r", revision_id), working_directory)


ACTIONS = (
    ActionSpec("jj_status", "Jujutsu Status", "Shows the current state of the working copy and the repo.",
               jj_status, read_only=True),
    ActionSpec("jj_log", "Jujutsu Log", "Shows the commit history.", jj_log, read_only=True),
    ActionSpec("jj_commit", "Jujutsu Commit", "Creates a new commit.", jj_commit),
    ActionSpec("jj_desc", "Jujutsu Describe Commit", "Amends the description of the specified commit.", jj_desc),
    ActionSpec("jj_diff", "Jujutsu Diff", "Shows the diff of the specified revision.", jj_diff, read_only=True),
    ActionSpec("jj_abandon", "Jujutsu Abandon", "Abandon the specified revision.", jj_abandon, destructive=True),
)

__all__ = [
    "ACTIONS",
    "DEFAULT_LOG_TEMPLATE",
    "jj_abandon",
    "jj_commit",
    "jj_desc",
    "jj_diff",
    "jj_log",
    "jj_status",
]
