import logging

import pytest

from jj_mcp import config
from jj_mcp.utils import _env_flag, _env_int, _truncate


@pytest.mark.parametrize(
    "name, expected",
    [
        ("DETAILED", config.DETAILED_LEVEL),
        ("chat", config.CHAT_LEVEL),
        ("warning", logging.WARNING),
        ("10", 10),
        ("not-a-level", logging.INFO),
        ("", logging.INFO),
        (None, logging.INFO),
    ],
)
def test_resolve_log_level(name, expected):
    assert config._resolve_log_level(name) == expected


def test_custom_logger_helpers_installed():
    assert logging.getLevelName(config.DETAILED_LEVEL) == "DETAILED"
    assert callable(getattr(logging.getLogger("jj_mcp"), "detailed"))
    assert callable(getattr(logging.getLogger("jj_mcp"), "chat"))


def test_env_flag(monkeypatch):
    monkeypatch.setenv("JJ_MCP_TEST_FLAG", "Yes")
    assert _env_flag("JJ_MCP_TEST_FLAG") is True

    monkeypatch.setenv("JJ_MCP_TEST_FLAG", "0")
    assert _env_flag("JJ_MCP_TEST_FLAG", default=True) is False

    monkeypatch.delenv("JJ_MCP_TEST_FLAG")
    assert _env_flag("JJ_MCP_TEST_FLAG", default=True) is True


def test_env_int_falls_back_on_garbage(monkeypatch):
    monkeypatch.setenv("JJ_MCP_TEST_INT", "42")
    assert _env_int("JJ_MCP_TEST_INT", 1) == 42

    monkeypatch.setenv("JJ_MCP_TEST_INT", "forty")
    assert _env_int("JJ_MCP_TEST_INT", 1) == 1


def test_truncate():
    assert _truncate("abcdef", 3) == ("abc", True)
    assert _truncate("abc", 0) == ("abc", False)


def test_loggers_share_base_namespace():
    assert config.TOOLS_LOGGER.name.startswith(config.BASE_LOGGER.name + ".")
    assert config.EXECUTOR_LOGGER.name.startswith(config.BASE_LOGGER.name + ".")
