"""Run jj subcommands and fold their outcome into text.

``execute_jj`` is the only entry point operations use. It never raises for
process-level problems: non-zero exits, spawn errors and timeouts all come
back as descriptive text, and are logged on ``jj_mcp.executor``.
"""

from __future__ import annotations

import asyncio
import os
import shutil
import signal
from dataclasses import dataclass
from typing import Optional

from jj_mcp import config
from jj_mcp.command_line import CommandLine
from jj_mcp.utils import _truncate


@dataclass(frozen=True)
class ExecutionResult:
    stdout: str = ""
    stderr: str = ""
    exit_code: Optional[int] = 0
    timed_out: bool = False
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.timed_out or self.error is not None or self.exit_code != 0


def _display_command(command: CommandLine) -> str:
    return command.render(program=config.JJ_BINARY)


def format_result(command: CommandLine, result: ExecutionResult) -> str:
    """Render an ``ExecutionResult`` as the text returned to the caller."""

    if result.failed:
        lines = [f"Error executing command: {_display_command(command)}"]
        if result.timed_out:
            lines.append(f"Command timed out after {config.COMMAND_TIMEOUT_SECONDS}s")
        elif result.error is not None:
            lines.append(result.error)
        else:
            lines.append(f"exit code: {result.exit_code}")
        if result.stderr:
            lines.append(f"stderr: {result.stderr}")
        if result.stdout:
            lines.append(f"stdout: {result.stdout}")
        return "\n".join(lines)

    if result.stderr:
        # jj writes hints and warnings to stderr on success.
        return f"stdout: {result.stdout}\nstderr: {result.stderr}"
    return result.stdout


def _clip(value: str, limit: int, stream: str) -> str:
    clipped, truncated = _truncate(value, limit)
    if truncated:
        clipped += f"\n[{stream} truncated to {limit} chars]"
    return clipped


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    # POSIX: signal the whole process group, including pagers spawned by jj.
    if os.name != "nt":
        try:
            os.killpg(proc.pid, signal.SIGTERM)
        except ProcessLookupError:
            return
        try:
            await asyncio.wait_for(proc.wait(), timeout=3)
        except asyncio.TimeoutError:
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except ProcessLookupError:
                return
    else:
        try:
            proc.kill()
        except ProcessLookupError:
            return


async def _spawn(command: CommandLine, cwd: str) -> asyncio.subprocess.Process:
    start_new_session = os.name != "nt"
    if config.SHELL_MODE:
        shell_executable = os.environ.get("SHELL")
        if os.name == "nt":
            shell_executable = shell_executable or shutil.which("bash")
        return await asyncio.create_subprocess_shell(
            _display_command(command),
            cwd=cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            executable=shell_executable,
            start_new_session=start_new_session,
        )
    return await asyncio.create_subprocess_exec(
        config.JJ_BINARY,
        *command.argv(),
        cwd=cwd,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        start_new_session=start_new_session,
    )


async def _run_command(command: CommandLine, *, cwd: str, timeout_seconds: int) -> ExecutionResult:
    """Spawn one jj process and wait for it. Spawn errors propagate."""

    proc = await _spawn(command, cwd)
    timeout = timeout_seconds if timeout_seconds and timeout_seconds > 0 else None

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        timed_out = False
    except asyncio.TimeoutError:
        timed_out = True
        await _terminate(proc)
        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=5)
        except (asyncio.TimeoutError, OSError, ValueError):
            stdout_bytes, stderr_bytes = b"", b""

    stdout = _clip(stdout_bytes.decode("utf-8", errors="replace"), config.TOOL_STDOUT_MAX_CHARS, "stdout")
    stderr = _clip(stderr_bytes.decode("utf-8", errors="replace"), config.TOOL_STDERR_MAX_CHARS, "stderr")

    return ExecutionResult(
        stdout=stdout,
        stderr=stderr,
        exit_code=proc.returncode,
        timed_out=timed_out,
    )


async def execute_jj(command: CommandLine, working_directory: str) -> str:
    """Run ``jj <command>`` in ``working_directory`` and return text. Never raises for process failures."""

    display = _display_command(command)
    try:
        result = await _run_command(
            command,
            cwd=working_directory,
            timeout_seconds=config.COMMAND_TIMEOUT_SECONDS,
        )
    except (OSError, ValueError) as exc:
        # ValueError: arguments containing NUL bytes cannot be spawned.
        config.EXECUTOR_LOGGER.error(
            "Failed to execute Jujutsu command: %s (cwd=%s): %s",
            display,
            working_directory,
            exc,
            extra={"event": "jj_spawn_error", "cwd": working_directory},
        )
        result = ExecutionResult(exit_code=None, error=f"{type(exc).__name__}: {exc}")
        return format_result(command, result)

    if result.failed:
        config.EXECUTOR_LOGGER.warning(
            "Jujutsu command failed: %s (cwd=%s, exit_code=%s, timed_out=%s)",
            display,
            working_directory,
            result.exit_code,
            result.timed_out,
            extra={"event": "jj_command_failed", "cwd": working_directory},
        )
    else:
        config.EXECUTOR_LOGGER.detailed(  # type: ignore[attr-defined]
            "Jujutsu command ok: %s (cwd=%s)",
            display,
            working_directory,
            extra={"event": "jj_command_ok", "cwd": working_directory},
        )
    return format_result(command, result)


__all__ = [
    "ExecutionResult",
    "execute_jj",
    "format_result",
]
