"""shipyard: maven, docker and kubernetes build-and-deploy pipeline."""

from shipyard.build_log import BuildLog
from shipyard.context import BuildContext
from shipyard.environment import EnvironmentStore, MergePolicy
from shipyard.errors import (
    ConfigurationError,
    MissingFileError,
    PipelineError,
    PipelineLoadError,
    ProcessFailure,
    StageFailure,
    TemplateError,
    ValidationError,
    WorkspaceInvalid,
)
from shipyard.executor import plan_stages, run_pipeline
from shipyard.loader import load_pipeline, validate_parameters
from shipyard.models import PipelineDefinition, PipelineResult, StageResult, StageStatus
from shipyard.pipeline_logger import configure_logging
from shipyard.templates import resolve

__all__ = [
    "BuildContext",
    "BuildLog",
    "configure_logging",
    "ConfigurationError",
    "EnvironmentStore",
    "load_pipeline",
    "MergePolicy",
    "MissingFileError",
    "PipelineDefinition",
    "PipelineError",
    "PipelineLoadError",
    "PipelineResult",
    "plan_stages",
    "ProcessFailure",
    "resolve",
    "run_pipeline",
    "StageFailure",
    "StageResult",
    "StageStatus",
    "TemplateError",
    "validate_parameters",
    "ValidationError",
    "WorkspaceInvalid",
]
