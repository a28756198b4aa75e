"""Build execution context.

One BuildContext exists per pipeline run. The controller owns it and
hands it to every stage; stages read and write its environment store
and run commands through it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Protocol

from shipyard.build_log import BuildLog
from shipyard.environment import EnvironmentStore
from shipyard.errors import ProcessFailure, WorkspaceInvalid
from shipyard.process import ProcessResult, ProcessRunner


class Runner(Protocol):
    async def execute(self, command: str, env: EnvironmentStore) -> ProcessResult: ...


@dataclass(frozen=True)
class Skip:
    """Returned by a stage that decided not to run."""

    reason: str


def check_workspace(workspace: str | Path | None) -> Path:
    if workspace is None:
        raise WorkspaceInvalid("workspace is not set")
    path = Path(workspace)
    if not path.exists():
        raise WorkspaceInvalid(f"workspace does not exist: {path}")
    if not path.is_dir():
        raise WorkspaceInvalid(f"workspace is not a directory: {path}")
    return path.resolve()


class BuildContext:
    """Shared mutable state for a single run.

    Not safe for concurrent writers; only the active stage mutates it.
    """

    def __init__(
        self,
        workspace: str | Path | None,
        build_number: int,
        *,
        env: EnvironmentStore | None = None,
        log: BuildLog | None = None,
        runner: Runner | None = None,
        started_at: datetime | None = None,
    ) -> None:
        self.workspace = check_workspace(workspace)
        self.build_number = build_number
        self.env = env if env is not None else EnvironmentStore()
        self.log = log if log is not None else BuildLog()
        self.runner = runner if runner is not None else ProcessRunner(self.workspace, self.log)
        self.started_at = started_at or datetime.now()
        # image tag produced by a successful docker build in this run
        self.built_image: str | None = None
        self.current_stage = "pipeline"

    @property
    def image_has_been_built(self) -> bool:
        return self.built_image is not None

    async def execute(self, command: str) -> ProcessResult:
        """Run *command* with the current environment.

        Raises:
            ProcessFailure: If the command exits non-zero.
        """
        self.log.notice("will execute command: %s", command)
        result = await self.runner.execute(command, self.env)
        if result.exit_code != 0:
            raise ProcessFailure(self.current_stage, command, result.exit_code)
        return result

    def skip(self, reason: str) -> Skip:
        self.log.notice("%s skipped: %s", self.current_stage, reason)
        return Skip(reason)
