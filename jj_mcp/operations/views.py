"""Read-only views published as MCP resources.

Views are not scoped to a caller-supplied path; they run in
``config.DEFAULT_REPOSITORY``.
"""

from jj_mcp import config, executor
from jj_mcp.command_line import CommandLine
from jj_mcp.operations._shared import ViewSpec
from jj_mcp.operations.basic import DEFAULT_LOG_TEMPLATE


async def jj_version() -> str:
    """Get the version of the Jujutsu binary."""
    return await executor.execute_jj(CommandLine("--version"), config.DEFAULT_REPOSITORY)


async def jj_info() -> str:
    """Status and recent history of the default repository."""
    status = await executor.execute_jj(CommandLine("status"), config.DEFAULT_REPOSITORY)
    log = await executor.execute_jj(
        CommandLine("log", "--limit", str(config.INFO_LOG_LIMIT), "-T", DEFAULT_LOG_TEMPLATE),
        config.DEFAULT_REPOSITORY,
    )
    return f"## Status\n{status.rstrip()}\n\n## Log\n{log.rstrip()}\n"


VIEWS = (
    ViewSpec("version", "jujutsu://version", "Jujutsu Version", "Get the version of the Jujutsu binary.",
             jj_version),
    ViewSpec("info", "jujutsu://info", "Jujutsu Repository Info",
             "Working-copy status and recent log of the server's default repository.", jj_info),
)

__all__ = [
    "VIEWS",
    "jj_info",
    "jj_version",
]
