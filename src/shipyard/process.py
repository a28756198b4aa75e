"""External process adapter.

Runs operator-authored shell command lines inside the workspace with the
environment store injected. Commands are passed to the shell as-is; no
quoting is applied.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import time
from dataclasses import dataclass, field
from pathlib import Path

from shipyard import pipeline_logger
from shipyard.build_log import BuildLog
from shipyard.environment import EnvironmentStore

# mvn and docker can emit very long progress lines, so output is read in
# fixed-size chunks and split into lines here rather than by the stream
_CHUNK_SIZE = 64 * 1024


@dataclass
class ProcessResult:
    command: str
    exit_code: int
    output: list[str] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ProcessRunner:
    """Spawns shell commands and tees their output to the build log.

    stdout and stderr are drained by two reader coroutines so neither
    pipe can fill up and stall the child. Both readers finish and the
    child is reaped before ``execute`` returns or raises.
    """

    def __init__(self, workspace: Path, log: BuildLog) -> None:
        self.workspace = workspace
        self.log = log

    async def execute(self, command: str, env: EnvironmentStore) -> ProcessResult:
        """Run *command* to completion and return its exit status."""
        start = time.monotonic()
        result = ProcessResult(command=command, exit_code=-1)

        proc = await asyncio.create_subprocess_shell(
            command,
            cwd=str(self.workspace),
            env={**os.environ, **env.as_dict()},
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

        readers = [
            asyncio.ensure_future(self._drain(stream, result))
            for stream in (proc.stdout, proc.stderr)
        ]
        try:
            await asyncio.gather(*readers)
            result.exit_code = await proc.wait()
        finally:
            for reader in readers:
                reader.cancel()
            if proc.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    proc.kill()
                await proc.wait()
        result.duration_ms = (time.monotonic() - start) * 1000

        pipeline_logger.log_process_exit(command, result.exit_code, result.duration_ms)
        return result

    async def _drain(
        self, stream: asyncio.StreamReader | None, result: ProcessResult
    ) -> None:
        if stream is None:
            return
        pending = b""
        while chunk := await stream.read(_CHUNK_SIZE):
            *lines, pending = (pending + chunk).split(b"\n")
            for raw in lines:
                self._emit(raw, result)
        if pending:
            self._emit(pending, result)

    def _emit(self, raw: bytes, result: ProcessResult) -> None:
        text = raw.decode("utf-8", errors="replace")
        result.output.append(text)
        self.log.line(text)
