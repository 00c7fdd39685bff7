import asyncio
import inspect

import pytest

from jj_mcp import executor


def pytest_configure(config):
    config.addinivalue_line("markers", "asyncio: mark test to run in event loop")


def pytest_pyfunc_call(pyfuncitem):
    if "asyncio" not in pyfuncitem.keywords:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    funcargs = {name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames}
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        loop.run_until_complete(test_func(**funcargs))
    finally:
        loop.close()
        asyncio.set_event_loop(None)

    return True


class CommandRecorder:
    """Stand-in for ``executor.execute_jj`` that records every command."""

    def __init__(self, output: str = "ok") -> None:
        self.output = output
        self.calls = []

    async def __call__(self, command, working_directory):
        self.calls.append((command, working_directory))
        return self.output

    @property
    def argvs(self):
        return [command.argv() for command, _ in self.calls]

    @property
    def cwds(self):
        return [cwd for _, cwd in self.calls]


@pytest.fixture
def jj_recorder(monkeypatch):
    recorder = CommandRecorder()
    monkeypatch.setattr(executor, "execute_jj", recorder)
    return recorder


@pytest.fixture
def repo_dir(tmp_path):
    return str(tmp_path)
