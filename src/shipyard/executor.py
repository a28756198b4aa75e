"""Pipeline executor: the main orchestrator.

Runs the main phase (maven, build-info merge, docker build, docker push,
deploy) fail-fast, then always runs the cleanup phase (prune, delete
image, description). The run fails if and only if the main phase did;
cleanup errors are logged and swallowed so they never mask the primary
failure.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from shipyard import constants, pipeline_logger
from shipyard.build_log import BuildLog
from shipyard.context import BuildContext, Runner, Skip
from shipyard.environment import EnvironmentStore, MergePolicy
from shipyard.errors import PipelineError, StageFailure
from shipyard.loader import validate_parameters
from shipyard.models import (
    DeleteImageStage,
    DeployStage,
    DockerBuildStage,
    DockerPushStage,
    MavenStage,
    PipelineDefinition,
    PipelineResult,
    PruneStage,
    Stage,
    StageResult,
    StageStatus,
)
from shipyard.stages.deploy import execute_deploy
from shipyard.stages.description import build_description
from shipyard.stages.docker import (
    execute_delete_image,
    execute_docker_build,
    execute_docker_push,
    execute_prune,
)
from shipyard.stages.maven import execute_maven, merge_build_info

_MAIN_PHASE = ("maven", "docker_build", "docker_push", "deploy")
_CLEANUP_PHASE = ("prune", "delete_image")

Phase = Literal["main", "cleanup"]


def plan_stages(definition: PipelineDefinition) -> list[Stage]:
    """Turn the persisted configuration sections into stage configs.

    Always returns all six stages in execution order; absent or
    disabled sections yield disabled stages.
    """
    maven = definition.maven
    docker = definition.docker
    deploy = definition.deploy

    docker_off = docker is None or docker.disabled
    push = docker.push if docker is not None else None

    return [
        MavenStage(
            disabled=maven is None or maven.disabled,
            command=maven.command if maven else "",
            java_home=maven.java_home if maven else None,
        ),
        DockerBuildStage(
            disabled=docker_off,
            build_image=bool(docker and docker.build_image),
            dockerfile=docker.dockerfile if docker else "Dockerfile",
            registry=push.registry if push else None,
        ),
        DockerPushStage(
            disabled=docker_off or push is None or push.disabled,
            push_image=bool(push and push.push_image),
        ),
        DeployStage(
            disabled=deploy is None or deploy.disabled,
            strict_templates=definition.strict_templates,
            **(
                deploy.model_dump(exclude={"disabled"}, round_trip=True)
                if deploy
                else {}
            ),
        ),
        PruneStage(disabled=docker_off),
        DeleteImageStage(
            disabled=docker_off,
            delete_image_after_build=bool(docker and docker.delete_image_after_build),
        ),
    ]


async def execute_stage(stage: Stage, context: BuildContext) -> Skip | None:
    """Dispatch a stage to its executor based on kind.

    Uses structural pattern matching on the Pydantic model type.
    """
    match stage:
        case MavenStage():
            return await execute_maven(stage, context)
        case DockerBuildStage():
            return await execute_docker_build(stage, context)
        case DockerPushStage():
            return await execute_docker_push(stage, context)
        case DeployStage():
            return await execute_deploy(stage, context)
        case PruneStage():
            return await execute_prune(stage, context)
        case DeleteImageStage():
            return await execute_delete_image(stage, context)
        case _:
            raise StageFailure(
                getattr(stage, "kind", "unknown"),
                f"Unknown stage kind: {getattr(stage, 'kind', 'unknown')}",
            )


async def _run_stage(
    stage: Stage, context: BuildContext, phase: Phase
) -> StageResult:
    """Run one stage and record its outcome.

    Raises StageFailure (or another PipelineError) when the stage fails;
    any unexpected exception is wrapped in StageFailure.
    """
    context.current_stage = stage.kind
    pipeline_logger.log_stage_start(stage.kind, phase)
    start = time.monotonic()

    try:
        outcome = await execute_stage(stage, context)
    except PipelineError:
        raise
    except Exception as e:
        raise StageFailure(stage.kind, str(e), cause=e) from e

    duration_ms = (time.monotonic() - start) * 1000
    if isinstance(outcome, Skip):
        pipeline_logger.log_stage_skipped(stage.kind, outcome.reason)
        return StageResult(
            stage_name=stage.kind,
            phase=phase,
            status=StageStatus.SKIPPED,
            detail=outcome.reason,
            duration_ms=duration_ms,
        )

    pipeline_logger.log_stage_complete(stage.kind, duration_ms)
    return StageResult(
        stage_name=stage.kind,
        phase=phase,
        status=StageStatus.SUCCEEDED,
        duration_ms=duration_ms,
    )


def _failed(stage_name: str, phase: Phase, error: Exception, start: float) -> StageResult:
    return StageResult(
        stage_name=stage_name,
        phase=phase,
        status=StageStatus.FAILED,
        detail=str(error),
        duration_ms=(time.monotonic() - start) * 1000,
    )


def seed_environment(
    context: BuildContext, parameters: Mapping[str, str]
) -> None:
    """Apply build parameters, then run-scoped variables if not given."""
    context.env.merge({k: str(v) for k, v in parameters.items()}, MergePolicy.OVERWRITE)
    context.env.set_if_absent(constants.BUILD_NUMBER, str(context.build_number))
    context.env.set_if_absent(
        constants.DATE, context.started_at.strftime(constants.DATE_FORMAT)
    )


async def run_pipeline(
    definition: PipelineDefinition,
    workspace: str | Path | None,
    build_number: int,
    parameters: Mapping[str, str] | None = None,
    *,
    log: BuildLog | None = None,
    runner: Runner | None = None,
) -> PipelineResult:
    """Execute a pipeline definition against a workspace.

    Args:
        definition: Parsed pipeline configuration.
        workspace: Build workspace root; must exist.
        build_number: Run ordinal supplied by the host build system.
        parameters: Build parameters seeding the environment store.
        log: Build log sink (stdout when omitted).
        runner: Process adapter (a ProcessRunner when omitted).

    Returns:
        PipelineResult; ``success`` is False iff the main phase failed.

    Raises:
        WorkspaceInvalid: If the workspace is unusable.
        ValidationError: If parameters don't match the parameter schema.
    """
    parameters = dict(parameters or {})
    if definition.parameters is not None:
        validate_parameters(definition.parameters, parameters)

    context = BuildContext(
        workspace,
        build_number,
        env=EnvironmentStore(),
        log=log,
        runner=runner,
    )
    seed_environment(context, parameters)
    pipeline_logger.log_pipeline_start(str(context.workspace), build_number)

    stages = {stage.kind: stage for stage in plan_stages(definition)}
    results: list[StageResult] = []
    failure: PipelineError | None = None
    start = time.monotonic()

    try:
        for kind in _MAIN_PHASE:
            stage_start = time.monotonic()
            try:
                results.append(await _run_stage(stages[kind], context, "main"))
                if kind == "maven":
                    context.current_stage = "build_info"
                    merge_build_info(context)
            except Exception as e:
                if isinstance(e, PipelineError):
                    failure = e
                else:
                    failure = StageFailure(context.current_stage, str(e), cause=e)
                results.append(_failed(context.current_stage, "main", failure, stage_start))
                context.log.notice("%s failed: %s", context.current_stage, failure)
                pipeline_logger.log_stage_failed(context.current_stage, str(failure))
                break
    finally:
        for kind in _CLEANUP_PHASE:
            stage_start = time.monotonic()
            try:
                results.append(await _run_stage(stages[kind], context, "cleanup"))
            except Exception as e:
                results.append(_failed(kind, "cleanup", e, stage_start))
                context.log.notice("%s failed during cleanup: %s", kind, e)
                pipeline_logger.log_cleanup_error(kind, str(e))

    description: str | None = None
    context.current_stage = "description"
    try:
        description = build_description(definition.description, context)
    except Exception as e:
        context.log.notice("description failed: %s", e)
        pipeline_logger.log_cleanup_error("description", str(e))

    total_ms = (time.monotonic() - start) * 1000
    success = failure is None
    pipeline_logger.log_pipeline_complete(success, total_ms)
    context.log.notice("build %s", "succeeded" if success else "failed")

    return PipelineResult(
        success=success,
        stage_results=results,
        environment=context.env.as_dict(),
        description=description,
        error=str(failure) if failure else None,
        total_duration_ms=total_ms,
    )
