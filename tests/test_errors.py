import asyncio

from jj_mcp.exceptions import OperationInputError, UnknownOperationError
from jj_mcp.mcp_server.errors import _structured_tool_error


def test_input_error_carries_field() -> None:
    exc = OperationInputError("jj_bookmark", "Error: Bookmark name is required.", field="name")

    error = _structured_tool_error(exc, context="jj_bookmark")["error"]

    assert error["category"] == "validation"
    assert error["field"] == "name"
    assert error["message"] == "Error: Bookmark name is required."
    assert error["context"] == "jj_bookmark"


def test_timeout_category() -> None:
    error = _structured_tool_error(asyncio.TimeoutError(), context="jj_git_fetch")["error"]

    assert error["category"] == "timeout"
    assert error["message"] == "TimeoutError"


def test_unknown_operation_is_not_found() -> None:
    error = _structured_tool_error(UnknownOperationError("jj_nope"), context="invoke")["error"]

    assert error["category"] == "not_found"
    assert "jj_nope" in error["message"]


def test_other_exceptions_are_unknown() -> None:
    error = _structured_tool_error(RuntimeError("boom"), context="jj_status")["error"]

    assert error == {
        "error": "RuntimeError",
        "message": "boom",
        "context": "jj_status",
        "category": "unknown",
    }
