from __future__ import annotations

import argparse
import asyncio
import json
import sys
import tomllib
from pathlib import Path


def _load_project_version(pyproject_path: Path | None = None) -> str:
    """Best-effort loader for the project version from pyproject.toml.

    This avoids importing the server module (and its FastMCP wiring)
    just to answer a simple CLI query like `--version`.
    """
    if pyproject_path is None:
        pyproject_path = Path(__file__).with_name("pyproject.toml")

    try:
        data = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return "0.0.0"
    except tomllib.TOMLDecodeError:
        return "0.0.0"

    project = data.get("project") or {}
    version = project.get("version")
    if isinstance(version, str) and version.strip():
        return version.strip()
    return "0.0.0"


def _run_doctor() -> int:
    """Check that the configured jj binary runs and print a summary."""
    from jj_mcp import config, executor
    from jj_mcp.command_line import CommandLine

    command = CommandLine("--version")
    try:
        result = asyncio.run(
            executor._run_command(
                command,
                cwd=config.DEFAULT_REPOSITORY,
                timeout_seconds=config.COMMAND_TIMEOUT_SECONDS,
            )
        )
    except OSError as exc:
        print(f"- [error] jj_binary: cannot run {config.JJ_BINARY!r}: {exc}")
        print("Status: error")
        return 1

    if result.failed:
        print(f"- [error] jj_binary: {executor.format_result(command, result).strip()}")
        print("Status: error")
        return 1

    print(f"- [ok] jj_binary: {result.stdout.strip()}")
    print(f"- [ok] default_repository: {config.DEFAULT_REPOSITORY}")
    print(f"- [ok] shell_mode: {'on' if config.SHELL_MODE else 'off'}")
    print("Status: ok")
    return 0


def _run_list() -> int:
    from jj_mcp.server import REGISTRY

    for spec in REGISTRY.actions:
        print(f"{spec.name}\t{spec.title}")
    for view in REGISTRY.views:
        print(f"{view.uri}\t{view.title}")
    return 0


def _run_call(name: str, raw_args: str) -> int:
    from jj_mcp.exceptions import UnknownOperationError
    from jj_mcp.server import REGISTRY

    try:
        arguments = json.loads(raw_args) if raw_args else {}
    except json.JSONDecodeError as exc:
        print(f"--args is not valid JSON: {exc}", file=sys.stderr)
        return 2
    if not isinstance(arguments, dict):
        print("--args must be a JSON object", file=sys.stderr)
        return 2

    try:
        if name in REGISTRY.uris():
            envelope = asyncio.run(REGISTRY.read(name))
            print(envelope["contents"][0]["text"], end="")
            return 0
        envelope = asyncio.run(REGISTRY.invoke(name, arguments))
    except UnknownOperationError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    text = envelope["content"][0]["text"]
    if envelope.get("isError"):
        print(text, file=sys.stderr)
        return 1
    print(text, end="" if text.endswith("\n") else "\n")
    return 0


def _run_serve(transport: str | None) -> int:
    import main as server_main

    server_main.main(transport)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="jj-mcp",
        description="Jujutsu MCP server CLI helpers.",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print the jj-mcp version and exit.",
    )

    subparsers = parser.add_subparsers(dest="command")
    serve = subparsers.add_parser("serve", help="Run the MCP server.")
    serve.add_argument(
        "--transport",
        choices=["stdio", "sse", "streamable-http"],
        default=None,
        help="Override MCP_TRANSPORT.",
    )
    subparsers.add_parser(
        "doctor",
        help="Check that the jj binary can be executed and print a summary.",
    )
    subparsers.add_parser("list", help="List registered tools and resources in order.")
    call = subparsers.add_parser("call", help="Invoke one tool (or read one resource URI) and print the text.")
    call.add_argument("name", help="Tool name or resource URI.")
    call.add_argument("--args", default="{}", help="Tool arguments as a JSON object.")

    if argv is None:
        argv = sys.argv[1:]

    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # When used as a library function in tests, return the exit code
        # instead of raising.
        return int(getattr(exc, "code", 1) or 0)

    if args.version and not args.command:
        print(_load_project_version())
        return 0

    if args.command == "doctor":
        return _run_doctor()
    if args.command == "list":
        return _run_list()
    if args.command == "call":
        return _run_call(args.name, args.args)
    if args.command == "serve":
        return _run_serve(args.transport)

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
