"""Shared fixtures: a recording process runner and an in-memory build log."""

from __future__ import annotations

import io
from collections.abc import Callable

import pytest

from shipyard.build_log import BuildLog
from shipyard.context import BuildContext
from shipyard.environment import EnvironmentStore
from shipyard.process import ProcessResult


class FakeRunner:
    """Records commands instead of running them.

    ``fail_on`` maps a command prefix to the exit status it should
    return. ``hooks`` maps a command prefix to a callable run before the
    command "finishes", for simulating side effects like downloads.
    """

    def __init__(self) -> None:
        self.commands: list[str] = []
        self.envs: list[dict[str, str]] = []
        self.fail_on: dict[str, int] = {}
        self.hooks: dict[str, Callable[[str], None]] = {}

    async def execute(self, command: str, env: EnvironmentStore) -> ProcessResult:
        self.commands.append(command)
        self.envs.append(env.as_dict())
        for prefix, hook in self.hooks.items():
            if command.startswith(prefix):
                hook(command)
        for prefix, code in self.fail_on.items():
            if command.startswith(prefix):
                return ProcessResult(command=command, exit_code=code)
        return ProcessResult(command=command, exit_code=0)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def log_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def build_log(log_stream) -> BuildLog:
    return BuildLog(log_stream)


@pytest.fixture
def context(tmp_path, runner, build_log) -> BuildContext:
    return BuildContext(tmp_path, 7, log=build_log, runner=runner)
