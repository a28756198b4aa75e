"""YAML pipeline configuration loading and parameter validation."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from pydantic import ValidationError as PydanticValidationError

from shipyard.errors import PipelineLoadError, ValidationError
from shipyard.models import PipelineDefinition


def load_pipeline(path: str | Path) -> PipelineDefinition:
    """Load a pipeline configuration from a YAML file.

    Parses YAML, then validates the structure via Pydantic.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Validated PipelineDefinition.

    Raises:
        PipelineLoadError: If the file doesn't exist, YAML is invalid,
            or the structure doesn't match the expected schema.
    """
    path = Path(path)
    if not path.is_file():
        raise PipelineLoadError(f"Pipeline file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise PipelineLoadError(f"Invalid YAML in {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise PipelineLoadError(
            f"Pipeline YAML must be a mapping, got {type(raw).__name__}"
        )

    try:
        return PipelineDefinition.model_validate(raw)
    except PydanticValidationError as e:
        raise PipelineLoadError(
            f"Pipeline structure invalid: {e}"
        ) from e


def validate_parameters(schema: dict[str, Any], data: Mapping[str, Any]) -> None:
    """Validate build parameters against the configuration's JSON Schema.

    Raises:
        ValidationError: If data doesn't match schema.
    """
    try:
        jsonschema.validate(instance=dict(data), schema=schema)
    except jsonschema.ValidationError as e:
        raise ValidationError(f"Parameter validation failed: {e.message}") from e
    except jsonschema.SchemaError as e:
        raise ValidationError(f"Parameter schema is invalid: {e.message}") from e
