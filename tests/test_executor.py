import shutil

import pytest

from jj_mcp import config, executor
from jj_mcp.command_line import CommandLine
from jj_mcp.executor import ExecutionResult, format_result


def _require(*binaries):
    missing = [b for b in binaries if shutil.which(b) is None]
    if missing:
        pytest.skip(f"requires {', '.join(missing)}")


def test_format_result_success_returns_stdout_verbatim(monkeypatch):
    monkeypatch.setattr(config, "JJ_BINARY", "jj")
    result = ExecutionResult(stdout="Working copy changes:\nA file\n")

    assert format_result(CommandLine("status"), result) == "Working copy changes:\nA file\n"


def test_format_result_success_keeps_stderr(monkeypatch):
    monkeypatch.setattr(config, "JJ_BINARY", "jj")
    result = ExecutionResult(stdout="done\n", stderr="Hint: something\n")

    assert format_result(CommandLine("new"), result) == "stdout: done\n\nstderr: Hint: something\n"


def test_format_result_failure_names_command_and_exit_code(monkeypatch):
    monkeypatch.setattr(config, "JJ_BINARY", "jj")
    result = ExecutionResult(stderr="Error: no such revision\n", exit_code=1)

    text = format_result(CommandLine("abandon", "-r", "nope"), result)

    assert text.splitlines()[0] == "Error executing command: jj abandon -r nope"
    assert "exit code: 1" in text
    assert "stderr: Error: no such revision" in text


def test_format_result_timeout(monkeypatch):
    monkeypatch.setattr(config, "JJ_BINARY", "jj")
    monkeypatch.setattr(config, "COMMAND_TIMEOUT_SECONDS", 7)

    text = format_result(CommandLine("git", "fetch"), ExecutionResult(exit_code=None, timed_out=True))

    assert text == "Error executing command: jj git fetch\nCommand timed out after 7s"


@pytest.mark.asyncio
async def test_execute_jj_returns_stdout(monkeypatch, tmp_path):
    _require("printf")
    monkeypatch.setattr(config, "JJ_BINARY", "printf")
    monkeypatch.setattr(config, "SHELL_MODE", False)

    text = await executor.execute_jj(CommandLine("%s|", "a b"), str(tmp_path))

    assert text == "a b|"


@pytest.mark.asyncio
async def test_execute_jj_runs_in_working_directory(monkeypatch, tmp_path):
    _require("pwd")
    monkeypatch.setattr(config, "JJ_BINARY", "pwd")
    monkeypatch.setattr(config, "SHELL_MODE", False)

    text = await executor.execute_jj(CommandLine(), str(tmp_path))

    assert text.strip() == str(tmp_path.resolve())


@pytest.mark.asyncio
async def test_execute_jj_success_with_stderr(monkeypatch, tmp_path):
    _require("sh")
    monkeypatch.setattr(config, "JJ_BINARY", "sh")
    monkeypatch.setattr(config, "SHELL_MODE", False)

    text = await executor.execute_jj(CommandLine("-c", "echo out; echo err 1>&2"), str(tmp_path))

    assert text == "stdout: out\n\nstderr: err\n"


@pytest.mark.asyncio
async def test_execute_jj_non_zero_exit_is_text_not_exception(monkeypatch, tmp_path):
    _require("sh")
    monkeypatch.setattr(config, "JJ_BINARY", "sh")
    monkeypatch.setattr(config, "SHELL_MODE", False)

    text = await executor.execute_jj(CommandLine("-c", "echo broken 1>&2; exit 3"), str(tmp_path))

    assert text.startswith("Error executing command: sh -c ")
    assert "exit code: 3" in text
    assert "stderr: broken" in text


@pytest.mark.asyncio
async def test_execute_jj_missing_binary_is_reported(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "JJ_BINARY", str(tmp_path / "no-such-jj"))
    monkeypatch.setattr(config, "SHELL_MODE", False)

    text = await executor.execute_jj(CommandLine("status"), str(tmp_path))

    assert text.startswith(f"Error executing command: {tmp_path / 'no-such-jj'} status")
    assert "FileNotFoundError" in text


@pytest.mark.asyncio
async def test_execute_jj_times_out(monkeypatch, tmp_path):
    _require("sleep")
    monkeypatch.setattr(config, "JJ_BINARY", "sleep")
    monkeypatch.setattr(config, "SHELL_MODE", False)
    monkeypatch.setattr(config, "COMMAND_TIMEOUT_SECONDS", 1)

    text = await executor.execute_jj(CommandLine("30"), str(tmp_path))

    assert text.startswith("Error executing command: sleep 30")
    assert "Command timed out after 1s" in text


@pytest.mark.asyncio
async def test_execute_jj_exec_mode_passes_message_verbatim(monkeypatch, tmp_path):
    _require("printf")
    monkeypatch.setattr(config, "JJ_BINARY", "printf")
    monkeypatch.setattr(config, "SHELL_MODE", False)
    message = "it's \"quoted\"\nand $HOME stays"

    text = await executor.execute_jj(CommandLine("%s|%s").add_message("-m", message), str(tmp_path))

    assert text == f"-m|{message}"


@pytest.mark.asyncio
async def test_execute_jj_shell_mode_decodes_message(monkeypatch, tmp_path):
    _require("printf", "sh", "base64")
    monkeypatch.setattr(config, "JJ_BINARY", "printf")
    monkeypatch.setattr(config, "SHELL_MODE", True)
    monkeypatch.setenv("SHELL", shutil.which("sh"))
    message = "it's \"quoted\"; `touch pwned`\nsecond line\n\n"

    text = await executor.execute_jj(CommandLine("%s|%s").add_message("-m", message), str(tmp_path))

    assert text == f"-m|{message}"
    assert not (tmp_path / "pwned").exists()


@pytest.mark.asyncio
async def test_execute_jj_truncates_stdout(monkeypatch, tmp_path):
    _require("printf")
    monkeypatch.setattr(config, "JJ_BINARY", "printf")
    monkeypatch.setattr(config, "SHELL_MODE", False)
    monkeypatch.setattr(config, "TOOL_STDOUT_MAX_CHARS", 4)

    text = await executor.execute_jj(CommandLine("abcdefgh"), str(tmp_path))

    assert text == "abcd\n[stdout truncated to 4 chars]"


@pytest.mark.asyncio
async def test_execute_jj_returns_output_bytes_unchanged(monkeypatch, tmp_path):
    _require("printf")
    monkeypatch.setattr(config, "JJ_BINARY", "printf")
    monkeypatch.setattr(config, "SHELL_MODE", False)
    raw = "-a\r\n+b\r\n\x0cpage\x1b[0m\x07"

    text = await executor.execute_jj(CommandLine("%s", raw), str(tmp_path))

    assert text == raw
