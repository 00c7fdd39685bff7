"""Git interop: push, fetch and remote management."""

from typing import Annotated, Optional

from pydantic import Field

from jj_mcp.command_line import CommandLine
from jj_mcp.operations._shared import ActionSpec, WorkingDirectory, run_jj

RemoteName = Annotated[str, Field(min_length=1, description="The remote's name.")]


async def jj_git_push(
    working_directory: WorkingDirectory,
    remote: Annotated[
        Optional[str], Field(description="The remote to push to (only named remotes are supported).")
    ] = None,
    revisions: Annotated[
        Optional[list[str]], Field(description="Push bookmarks pointing to these commits.")
    ] = None,
    bookmark: Annotated[
        Optional[list[str]], Field(description="Push only this bookmark, or bookmarks matching a pattern.")
    ] = None,
    change: Annotated[
        Optional[list[str]],
        Field(description="Push this commit by creating a bookmark based on its change ID."),
    ] = None,
    named: Annotated[
        Optional[list[str]],
        Field(
            description=(
                "Specify a new bookmark name and a revision to push under that name, e.g. 'myfeature=@'."
            )
        ),
    ] = None,
    all: Annotated[bool, Field(description="Push all bookmarks (including new bookmarks).")] = False,
    tracked: Annotated[bool, Field(description="Push all tracked bookmarks.")] = False,
    deleted: Annotated[bool, Field(description="Push all deleted bookmarks.")] = False,
    allow_empty_description: Annotated[
        bool, Field(description="Allow pushing commits with empty descriptions.")
    ] = False,
    allow_new: Annotated[bool, Field(description="Allow pushing new bookmarks.")] = False,
    allow_private: Annotated[bool, Field(description="Allow pushing commits that are private.")] = False,
    dry_run: Annotated[bool, Field(description="Only display what will change on the remote.")] = False,
) -> str:
    """Push to a Git remote."""
    command = (
        CommandLine("git", "push")
        .add_option("--remote", remote)
        .add_repeated("-r", revisions)
        .add_repeated("-b", bookmark)
        .add_repeated("-c", change)
        .add_repeated("--named", named)
        .add_flag("--all", all)
        .add_flag("--tracked", tracked)
        .add_flag("--deleted", deleted)
        .add_flag("--allow-empty-description", allow_empty_description)
        .add_flag("-N", allow_new)
        .add_flag("--allow-private", allow_private)
        .add_flag("--dry-run", dry_run)
    )
    return await run_jj("jj_git_push", command, working_directory)


async def jj_git_fetch(
    working_directory: WorkingDirectory,
    remote: Annotated[
        Optional[list[str]],
        Field(
            description=(
                "The remote(s) to fetch from. Defaults to the `git.fetch` setting, or \"origin\" "
                "when several remotes exist. Use a string pattern such as 'glob:*' to select remotes."
            )
        ),
    ] = None,
    branch: Annotated[
        Optional[list[str]],
        Field(
            description=(
                "Fetch only some of the branches. Names match exactly; use the `glob:` prefix to "
                "expand `*`, e.g. 'glob:push-*'."
            )
        ),
    ] = None,
    all_remotes: Annotated[bool, Field(description="Fetch from all remotes.")] = False,
) -> str:
    """Fetch from a Git remote."""
    command = (
        CommandLine("git", "fetch")
        .add_repeated("--remote", remote)
        .add_repeated("-b", branch)
        .add_flag("--all-remotes", all_remotes)
    )
    return await run_jj("jj_git_fetch", command, working_directory)


async def jj_git_remote_add(
    remote: RemoteName,
    url: Annotated[str, Field(min_length=1, description="The remote's URL or path.")],
    working_directory: WorkingDirectory,
) -> str:
    """Add a Git remote."""
    return await run_jj("jj_git_remote_add", CommandLine("git", "remote", "add", remote, url), working_directory)


async def jj_git_remote_list(working_directory: WorkingDirectory) -> str:
    """List Git remotes."""
    return await run_jj("jj_git_remote_list", CommandLine("git", "remote", "list"), working_directory)


async def jj_git_remote_remove(remote: RemoteName, working_directory: WorkingDirectory) -> str:
    """Remove a Git remote and forget its bookmarks."""
    return await run_jj("jj_git_remote_remove", CommandLine("git", "remote", "remove", remote), working_directory)


async def jj_git_remote_rename(
    old_name: Annotated[str, Field(min_length=1, description="The name of an existing remote.")],
    new_name: Annotated[str, Field(min_length=1, description="The desired name for the remote.")],
    working_directory: WorkingDirectory,
) -> str:
    """Rename a Git remote."""
    command = CommandLine("git", "remote", "rename", old_name, new_name)
    return await run_jj("jj_git_remote_rename", command, working_directory)


async def jj_git_remote_set_url(
    remote: RemoteName,
    url: Annotated[str, Field(min_length=1, description="The desired URL or path for the remote.")],
    working_directory: WorkingDirectory,
) -> str:
    """Set the URL of a Git remote."""
    command = CommandLine("git", "remote", "set-url", remote, url)
    return await run_jj("jj_git_remote_set_url", command, working_directory)


ACTIONS = (
    ActionSpec("jj_git_push", "Jujutsu Git Push", "Push to a Git remote.", jj_git_push, destructive=True),
    ActionSpec("jj_git_fetch", "Jujutsu Git Fetch", "Fetch from a Git remote.", jj_git_fetch),
    ActionSpec("jj_git_remote_add", "Jujutsu Git Remote Add", "Add a Git remote.", jj_git_remote_add),
    ActionSpec("jj_git_remote_list", "Jujutsu Git Remote List", "List Git remotes.",
               jj_git_remote_list, read_only=True),
    ActionSpec("jj_git_remote_remove", "Jujutsu Git Remote Remove",
               "Remove a Git remote and forget its bookmarks.", jj_git_remote_remove, destructive=True),
    ActionSpec("jj_git_remote_rename", "Jujutsu Git Remote Rename", "Rename a Git remote.",
               jj_git_remote_rename),
    ActionSpec("jj_git_remote_set_url", "Jujutsu Git Remote Set URL", "Set the URL of a Git remote.",
               jj_git_remote_set_url),
)

__all__ = [
    "ACTIONS",
    "jj_git_fetch",
    "jj_git_push",
    "jj_git_remote_add",
    "jj_git_remote_list",
    "jj_git_remote_remove",
    "jj_git_remote_rename",
    "jj_git_remote_set_url",
]
