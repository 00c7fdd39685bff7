import shutil
import subprocess

import pytest

from jj_mcp.command_line import CommandLine, EncodedArgument, decode_into, encode_shell_argument

needs_shell = pytest.mark.skipif(
    shutil.which("sh") is None or shutil.which("base64") is None,
    reason="requires a POSIX shell with base64",
)


def _sh(script: str, cwd: str) -> str:
    proc = subprocess.run(
        ["sh", "-c", script],
        cwd=cwd,
        capture_output=True,
        encoding="utf-8",
        check=True,
    )
    return proc.stdout


def test_encode_uses_base64_payload_and_sentinel():
    assert encode_shell_argument("hi") == '"$(printf %s aGk= | base64 -d; printf x)"'


def test_decode_into_strips_sentinel():
    assert decode_into("v", "hi") == 'v="$(printf %s aGk= | base64 -d; printf x)"; v="${v%x}"'


@pytest.mark.parametrize(
    "raw",
    [
        "fix: handle 'single' and \"double\" quotes",
        "first line\nsecond line",
        "ends with newlines\n\n",
        "x",
        "; echo injected",
        "$HOME and `uname` stay literal",
        "héllo ✓",
    ],
)
@needs_shell
def test_decoded_variable_survives_shell_round_trip(raw, tmp_path):
    assert _sh(f'{decode_into("v", raw)}; printf %s "$v"', str(tmp_path)) == raw


@needs_shell
def test_encoded_argument_does_not_execute_substitutions(tmp_path):
    raw = "$(touch pwned)"

    assert _sh(f'{decode_into("v", raw)}; printf %s "$v"', str(tmp_path)) == raw
    assert not (tmp_path / "pwned").exists()


def test_argv_keeps_raw_text_and_render_encodes_it():
    command = CommandLine("describe").add_message("-m", "x").add("my rev")

    assert command.argv() == ["describe", "-m", "x", "my rev"]
    assert command.render() == (
        '_jj_arg1="$(printf %s eA== | base64 -d; printf x)"; _jj_arg1="${_jj_arg1%x}"; '
        "describe -m \"$_jj_arg1\" 'my rev'"
    )
    assert command.tokens[2] == EncodedArgument("x")


def test_render_with_program_prefix():
    assert CommandLine("status").render(program="jj") == "jj status"
    assert CommandLine().render(program="jj") == "jj"


def test_render_empty_message_is_empty_quotes():
    assert CommandLine("describe").add_message("-m", "").render() == 'describe -m ""'


def test_add_option_skips_missing_values():
    command = CommandLine("bookmark", "create", "main").add_option("-r", None).add_option("-r", "")

    assert command.argv() == ["bookmark", "create", "main"]


def test_add_repeated_emits_flag_per_value_in_order():
    command = CommandLine("rebase").add_repeated("-d", ["a", "b"]).add_repeated("-s", None)

    assert command.argv() == ["rebase", "-d", "a", "-d", "b"]


def test_add_positionals_and_flags():
    command = (
        CommandLine("bookmark", "set")
        .add_positionals(["one", "two"])
        .add_flag("-B", True)
        .add_flag("--dry-run", False)
    )

    assert command.argv() == ["bookmark", "set", "one", "two", "-B"]


def test_render_quotes_literal_metacharacters():
    command = CommandLine("log", "-r", "main | @-")

    assert command.render() == "log -r 'main | @-'"


def test_equality_compares_tokens():
    assert CommandLine("status") == CommandLine("status")
    assert CommandLine("commit").add_message("-m", "a") != CommandLine("commit", "-m", "a")


@needs_shell
@pytest.mark.parametrize(
    "message",
    [
        "Fix: Update 'config' file\nAdded \"new feature\" support",
        "Subject\n\nBody ends with a newline\n",
    ],
)
def test_rendered_commit_command_yields_exact_message_token(message, tmp_path):
    command = CommandLine("commit").add_message("-m", message)

    script = f'third() {{ printf %s "$3"; }}; {command.render(program="third")}'

    assert _sh(script, str(tmp_path)) == message


@needs_shell
def test_rendered_command_with_two_messages(tmp_path):
    command = CommandLine("a").add_message("-m", "one\n").add_message("-m", "two\n")

    script = f'show() {{ printf "[%s]" "$@"; }}; {command.render(program="show")}'

    assert _sh(script, str(tmp_path)) == "[a][-m][one\n][-m][two\n]"
