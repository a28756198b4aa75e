"""Custom exception hierarchy for shipyard.

All exceptions inherit from PipelineError so callers can catch broadly
or narrowly as needed. Stages raise; only the controller decides what
a given kind means for the run.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base for all shipyard errors."""


class PipelineLoadError(PipelineError):
    """YAML parsing or pipeline configuration validation failed."""


class ValidationError(PipelineError):
    """Build parameters failed validation against the parameter schema."""


class WorkspaceInvalid(PipelineError):
    """Workspace is missing or not a directory."""


class ConfigurationError(PipelineError):
    """A stage found its configuration unusable (e.g. no registry)."""


class MissingFileError(PipelineError):
    """A workspace file could not be located."""

    def __init__(self, file_name: str) -> None:
        self.file_name = file_name
        super().__init__(f"Could not find '{file_name}' in workspace")


class TemplateError(PipelineError):
    """Strict template rendering found unresolved placeholders."""

    def __init__(self, keys: list[str]) -> None:
        self.keys = keys
        super().__init__(f"Unresolved template placeholders: {', '.join(keys)}")


class StageFailure(PipelineError):
    """A main-phase stage failed; the run is marked failed."""

    def __init__(
        self,
        stage_name: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        self.stage_name = stage_name
        self.cause = cause
        super().__init__(f"Stage '{stage_name}' failed: {message}")


class ProcessFailure(StageFailure):
    """An external command exited with a non-zero status."""

    def __init__(self, stage_name: str, command: str, exit_code: int) -> None:
        self.command = command
        self.exit_code = exit_code
        super().__init__(
            stage_name,
            f'command "{command}" exited with status {exit_code}',
        )
